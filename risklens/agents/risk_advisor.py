# risklens/agents/risk_advisor.py

import json
import logging
from typing import Optional

from langsmith import traceable
from pydantic import BaseModel, Field, ValidationError

from risklens.ports.llm_gateway import LLMError, LLMGateway
from risklens.schemas.risk import RiskType


logger = logging.getLogger(__name__)

ADVISOR_PROMPT = """You are an expert Risk Manager.

User Input Title: "{title}"
User Input Description: "{description}"
User Selected Category: "{target_kind}"

Task:
1. Decide whether the text describes a "risk" (potential future event) or an "issue" (event already happened or happening).
2. If it matches the selected category, refine it to be clear and professional (in Thai).
3. If it matches the opposite category, rewrite the title and description to fit the selected category.
4. Suggest likelihood (1-5) and impact (1-5) for the rewritten content.
5. Give short reasoning in Thai.

Respond with a single JSON object with the keys:
detected_kind ("risk"|"issue"), target_kind ("risk"|"issue"), confidence (0-1), reasoning,
suggested_likelihood, suggested_impact, improved_title, improved_description
"""

ADVISOR_ISSUE_KEYWORDS = [
    "happened", "occurred", "broke", "failed", "is happening", "outage", "crash", "stopped",
    "incident", "issue", "problem", "ล่ม", "พัง", "เสีย",
]
ADVISOR_RISK_KEYWORDS = [
    "might", "could", "may", "potential", "risk", "future", "threat", "forecast", "expecting",
    "likely", "อาจ", "ความเสี่ยง", "แนวโน้ม",
]


class AdvisorResult(BaseModel):
    detected_kind: RiskType = Field(..., description="What the original text reads as")
    target_kind: RiskType = Field(..., description="What the user wants to record")
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    suggested_likelihood: int = Field(..., ge=1, le=5)
    suggested_impact: int = Field(..., ge=1, le=5)
    improved_title: str
    improved_description: str
    source: str = Field("keyword", description='"llm" or "keyword"')


class RiskAdvisor:
    """
    Reviews a draft risk before it is saved: checks that it reads as the kind
    the user picked, rewrites it when it does not, and suggests scores.

    Works without an LLM; the keyword analysis is also the fallback whenever
    the LLM call or its output fails.
    """

    def __init__(self, llm: Optional[LLMGateway] = None):
        self._llm = llm

    @traceable(name="risk_advisor_analyze")
    def analyze(self, title: str, description: str, target_kind: RiskType) -> AdvisorResult:
        if self._llm is None:
            return self.keyword_analysis(title, description, target_kind)

        prompt = ADVISOR_PROMPT.format(title=title, description=description, target_kind=target_kind.value)
        try:
            data = self._llm.invoke_json(prompt, temperature=0.2)
            data["target_kind"] = target_kind.value
            return AdvisorResult(**data, source="llm")
        except LLMError as e:
            logger.warning(f"Risk advisor LLM call failed, using keyword analysis: {e}")
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Risk advisor response unusable, using keyword analysis: {e}")
        return self.keyword_analysis(title, description, target_kind)

    def keyword_analysis(self, title: str, description: str, target_kind: RiskType) -> AdvisorResult:
        text = f"{title} {description}".lower()
        issue_count = sum(1 for w in ADVISOR_ISSUE_KEYWORDS if w in text)
        risk_count = sum(1 for w in ADVISOR_RISK_KEYWORDS if w in text)

        if issue_count > risk_count:
            detected = RiskType.ISSUE
        elif risk_count > issue_count:
            detected = RiskType.RISK
        else:
            detected = target_kind  # benefit of the doubt

        if detected == target_kind:
            improved_title = title
            improved_description = description
            reasoning = "รายละเอียดสอดคล้องกับประเภทที่เลือกครับ"
        elif target_kind == RiskType.RISK:
            improved_title = f"ความเสี่ยงที่ {title} อาจเกิดขึ้นซ้ำ"
            improved_description = f"ความเสี่ยงที่เหตุการณ์นี้อาจเกิดขึ้นอีกและกระทบการดำเนินงาน: {description}"
            reasoning = "ข้อความนี้ดูเหมือนเป็นปัญหาที่เกิดขึ้นแล้ว (Issue) ให้ผมช่วยปรับเป็น 'ความเสี่ยง' (Risk) ไหมครับ?"
        else:
            improved_title = f"ปัญหา: {title}"
            improved_description = f"เหตุการณ์ {title} ได้เกิดขึ้นแล้วและกำลังส่งผลกระทบ: {description}"
            reasoning = "ข้อความนี้ดูเหมือนเป็นความเสี่ยง (Risk) ให้ผมช่วยปรับเป็น 'ปัญหา' (Issue) ที่เกิดขึ้นจริงไหมครับ?"

        return AdvisorResult(
            detected_kind=detected,
            target_kind=target_kind,
            confidence=0.85,
            reasoning=reasoning,
            suggested_likelihood=5 if target_kind == RiskType.ISSUE else 3,
            suggested_impact=3,
            improved_title=improved_title,
            improved_description=improved_description,
            source="keyword",
        )
