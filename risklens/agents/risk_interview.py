# risklens/agents/risk_interview.py
"""
Conversational risk interview.

A free-text report picks a question flow; each answer is a typed variant
matching its question's type, and the finished interview folds into a risk
statement with an estimated likelihood and impact.
"""
import logging
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from risklens.schemas.risk import RiskType


logger = logging.getLogger(__name__)


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TEXT = "text"
    NUMBER = "number"


class QuestionOption(BaseModel):
    value: str
    label: str


class InterviewQuestion(BaseModel):
    id: str
    question: str
    type: QuestionType
    options: List[QuestionOption] = Field(default_factory=list)
    context: Optional[str] = Field(None, description="Why the question is asked")


# --- Answers: one variant per question type ---
class SingleChoiceAnswer(BaseModel):
    type: Literal["single_choice"] = "single_choice"
    value: str


class MultiChoiceAnswer(BaseModel):
    type: Literal["multiple_choice"] = "multiple_choice"
    values: List[str] = Field(default_factory=list)


class TextAnswer(BaseModel):
    type: Literal["text"] = "text"
    text: str


class NumberAnswer(BaseModel):
    type: Literal["number"] = "number"
    value: float


Answer = Annotated[
    Union[SingleChoiceAnswer, MultiChoiceAnswer, TextAnswer, NumberAnswer],
    Field(discriminator="type"),
]


def answer_value(answer: Answer) -> Union[str, List[str], float]:
    if isinstance(answer, SingleChoiceAnswer):
        return answer.value
    elif isinstance(answer, MultiChoiceAnswer):
        return list(answer.values)
    elif isinstance(answer, TextAnswer):
        return answer.text
    elif isinstance(answer, NumberAnswer):
        return answer.value
    raise TypeError(f"Unsupported answer type: {type(answer).__name__}")


class InvalidAnswerError(ValueError):
    """Answer does not fit the question it was given for"""
    pass


class FlowSelection(BaseModel):
    flow: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    suggested_kind: RiskType


class RiskStatement(BaseModel):
    title: str
    description: str
    likelihood: int = Field(..., ge=1, le=5)
    impact: int = Field(..., ge=1, le=5)
    reasoning: str


def _q(qid: str, question: str, qtype: QuestionType, options=(), context: Optional[str] = None) -> InterviewQuestion:
    return InterviewQuestion(
        id=qid,
        question=question,
        type=qtype,
        options=[QuestionOption(value=v, label=l) for v, l in options],
        context=context,
    )


QUESTION_TEMPLATES: Dict[str, List[InterviewQuestion]] = {
    "vendor_delay": [
        _q("vendor_name", "เป็น vendor รายไหนครับ?", QuestionType.TEXT,
           context="เพื่อประเมิน criticality - vendor หลักหรือรอง"),
        _q("delay_duration", "ล่าช้าประมาณกี่วัน?", QuestionType.SINGLE_CHOICE, [
            ("1-3", "1-3 วัน (Minor)"),
            ("4-7", "4-7 วัน (Moderate)"),
            ("8-14", "8-14 วัน (Major)"),
            ("15+", "15+ วัน (Critical)"),
        ], context="ระยะเวลาส่งผลต่อ impact score"),
        _q("affected_areas", "กระทบส่วนไหนบ้าง? (เลือกได้หลายข้อ)", QuestionType.MULTIPLE_CHOICE, [
            ("production", "สายการผลิต"),
            ("delivery", "การส่งมอบลูกค้า"),
            ("revenue", "รายได้"),
            ("reputation", "ชื่อเสียง"),
            ("other_contracts", "สัญญาอื่นๆ"),
        ], context="ยิ่งกระทบหลายส่วน ยิ่งต้อง escalate"),
        _q("mitigation", "มีแผนรองรับหรือยัง?", QuestionType.SINGLE_CHOICE, [
            ("none", "ยังไม่มี"),
            ("planned", "วางแผนแล้ว รอ execute"),
            ("active", "กำลังทำอยู่"),
            ("resolved", "แก้ไขแล้ว"),
        ], context="ถ้ายังไม่มีแผน ต้องรีบทำ"),
    ],
    "server_capacity": [
        _q("server_type", "เป็นระบบไหนครับ?", QuestionType.SINGLE_CHOICE, [
            ("production", "Production (ลูกค้าใช้งาน)"),
            ("internal", "Internal (พนักงานใช้)"),
            ("backup", "Backup/DR"),
        ]),
        _q("current_usage", "ใช้งานไปกี่เปอร์เซ็นต์แล้ว?", QuestionType.SINGLE_CHOICE, [
            ("70-80", "70-80%"),
            ("80-90", "80-90%"),
            ("90-95", "90-95%"),
            ("95+", "95%+"),
        ]),
        _q("mitigation", "มีแผน scale หรือยัง?", QuestionType.SINGLE_CHOICE, [
            ("active", "Auto-scaling ทำงานอยู่"),
            ("planned", "ต้อง scale เอง (มีแผน)"),
            ("budget_pending", "รออนุมัติ budget"),
            ("none", "ยังไม่มีแผน"),
        ]),
    ],
    "client_risk": [
        _q("client_name", "ชื่อลูกค้าหรือโครงการคืออะไรครับ?", QuestionType.TEXT,
           context="ระบุเพื่อให้ทีม Sales ทราบ"),
        _q("contract_impact", "มูลค่าสัญญาหรือผลกระทบทางการเงินประมาณเท่าไหร่?", QuestionType.SINGLE_CHOICE, [
            ("low", "< $10k"),
            ("medium", "$10k - $100k"),
            ("high", "> $100k"),
        ]),
        _q("relationship_status", "สถานะความสัมพันธ์กับลูกค้าตอนนี้เป็นอย่างไร?", QuestionType.SINGLE_CHOICE, [
            ("good", "ดี"),
            ("strained", "ตึงเครียด"),
            ("critical", "วิกฤต (อาจยกเลิกสัญญา)"),
        ]),
    ],
    "hr_risk": [
        _q("position", "ตำแหน่งที่มีปัญหาคืออะไรครับ?", QuestionType.TEXT),
        _q("impact_level", "ผลกระทบต่องานมากน้อยแค่ไหน?", QuestionType.SINGLE_CHOICE, [
            ("low", "กระทบเล็กน้อย"),
            ("medium", "งานล่าช้าแต่จัดการได้"),
            ("high", "งานหยุดชะงัก / Project เสี่ยงล้มเหลว"),
        ]),
        _q("replacement_plan", "แผนการหาคนทดแทนเป็นอย่างไร?", QuestionType.SINGLE_CHOICE, [
            ("internal", "มีคนในแทนได้"),
            ("recruiting", "กำลังรับสมัคร"),
            ("difficult", "หายาก / ต้องใช้เวลาฝึกนาน"),
        ]),
    ],
    "generic": [
        _q("impact_desc", "ความเสี่ยงนี้ส่งผลกระทบหลักๆ เรื่องอะไรครับ?", QuestionType.TEXT,
           context="เช่น การเงิน, ชื่อเสียง, ความปลอดภัย"),
        _q("likelihood_est", "โอกาสที่จะเกิดขึ้นมีมากน้อยแค่ไหน?", QuestionType.SINGLE_CHOICE, [
            ("1", "น้อยมาก (Rare)"),
            ("3", "ปานกลาง (Possible)"),
            ("5", "สูงมาก (Almost Certain)"),
        ]),
        _q("severity", "ความรุนแรงหากเกิดขึ้น?", QuestionType.SINGLE_CHOICE, [
            ("1", "เล็กน้อย"),
            ("3", "ปานกลาง"),
            ("5", "รุนแรงมาก"),
        ]),
    ],
}

# (flow, keywords, confidence, suggested kind), checked in order
FLOW_KEYWORDS = [
    ("vendor_delay", ["vendor", "supplier", "ส่งของ"], 0.9, RiskType.RISK),
    ("server_capacity", ["server", "ระบบล่ม", "capacity"], 0.85, RiskType.ISSUE),
    ("client_risk", ["ลูกค้า", "client", "contract", "สัญญา"], 0.8, RiskType.RISK),
    ("hr_risk", ["พนักงาน", "ลาออก", "turnover", "employee", "resign"], 0.85, RiskType.RISK),
]

MITIGATION_TEXT = {
    "none": "ยังไม่มีแผนรองรับ",
    "planned": "มีแผนรองรับแล้ว รอดำเนินการ",
    "active": "กำลังดำเนินการแก้ไข",
    "resolved": "แก้ไขแล้ว",
    "budget_pending": "รออนุมัติงบประมาณ",
}
CONTRACT_IMPACT_TEXT = {"low": "< $10k", "medium": "$10k-$100k", "high": "> $100k"}
REPLACEMENT_PLAN_TEXT = {"internal": "ใช้คนใน", "recruiting": "กำลังรับสมัคร", "difficult": "หาคนยาก"}


def select_flow(text: str) -> FlowSelection:
    """Picks the question flow for a free-text report by keyword."""
    lower = (text or "").lower()
    for flow, keywords, confidence, kind in FLOW_KEYWORDS:
        if any(kw in lower for kw in keywords):
            return FlowSelection(flow=flow, confidence=confidence, suggested_kind=kind)
    return FlowSelection(flow="generic", confidence=0.5, suggested_kind=RiskType.RISK)


def check_answer(question: InterviewQuestion, answer: Answer) -> None:
    """
    Raises InvalidAnswerError unless the answer variant matches the question
    type and every chosen value is one of the question's options.
    """
    if answer.type != question.type.value:
        raise InvalidAnswerError(f"Question '{question.id}' expects {question.type.value}, got {answer.type}")

    allowed = {option.value for option in question.options}
    chosen = answer_value(answer)
    if isinstance(answer, SingleChoiceAnswer) and chosen not in allowed:
        raise InvalidAnswerError(f"'{chosen}' is not an option of '{question.id}'")
    if isinstance(answer, MultiChoiceAnswer) and not set(chosen) <= allowed:
        raise InvalidAnswerError(f"{sorted(set(chosen) - allowed)} are not options of '{question.id}'")


def validate_answers(flow: str, answers: Dict[str, Answer]) -> None:
    """Checks a whole answer set against the questions of one flow."""
    if flow not in QUESTION_TEMPLATES:
        raise InvalidAnswerError(f"Unknown interview flow: {flow}")
    questions = {question.id: question for question in QUESTION_TEMPLATES[flow]}
    for qid, answer in answers.items():
        if qid not in questions:
            raise InvalidAnswerError(f"'{qid}' is not a question of the {flow} flow")
        check_answer(questions[qid], answer)


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def generate_statement(
    original_input: str,
    answers: Dict[str, Answer],
    flow: Optional[str] = None,
) -> RiskStatement:
    """
    Folds interview answers into a risk statement.

    Answers are validated against ``flow`` first (by default the flow
    ``select_flow`` picks for the original input); an answer to an unknown
    question, of the wrong type or outside the options raises
    InvalidAnswerError.

    Likelihood and impact start at 3. A missing mitigation plan raises
    likelihood, active mitigation lowers it, and an explicit estimate
    overrides both. Revenue or production exposure and a wide blast radius
    raise impact; high/low impact answers pin it to 5/2 and an explicit
    severity overrides everything. Both are clamped to 1-5.
    """
    validate_answers(flow or select_flow(original_input).flow, answers)
    values = {qid: answer_value(answer) for qid, answer in answers.items()}

    likelihood = 3
    impact = 3

    mitigation = values.get("mitigation")
    if mitigation == "none":
        likelihood += 1
    elif mitigation == "active":
        likelihood -= 1
    if "likelihood_est" in values:
        likelihood = _to_int(values["likelihood_est"], 3)

    areas = values.get("affected_areas") or []
    if "revenue" in areas:
        impact += 1
    if "production" in areas:
        impact += 1
    if len(areas) > 2:
        impact += 1

    if values.get("impact_level") == "high" or values.get("contract_impact") == "high":
        impact = 5
    if values.get("impact_level") == "low" or values.get("contract_impact") == "low":
        impact = 2
    if "severity" in values:
        impact = _to_int(values["severity"], 3)

    likelihood = max(1, min(5, likelihood))
    impact = max(1, min(5, impact))

    title = original_input
    if values.get("vendor_name"):
        title = f"ความเสี่ยง {values['vendor_name']} ส่งของล่าช้า"
    elif values.get("client_name"):
        title = f"ความเสี่ยงโครงการลูกค้า {values['client_name']}"
    elif values.get("position"):
        title = f"ปัญหาอัตรากำลังคน: {values['position']}"

    parts = [original_input]
    if values.get("delay_duration"):
        parts.append(f"ระยะเวลาล่าช้า: {values['delay_duration']} วัน")
    if areas:
        parts.append(f"กระทบต่อ: {', '.join(areas)}")
    if values.get("contract_impact"):
        parts.append(f"มูลค่าผลกระทบ: {CONTRACT_IMPACT_TEXT.get(values['contract_impact'], values['contract_impact'])}")
    if values.get("replacement_plan"):
        parts.append(f"แผนทดแทน: {REPLACEMENT_PLAN_TEXT.get(values['replacement_plan'], values['replacement_plan'])}")
    if values.get("impact_desc"):
        parts.append(f"ผลกระทบ: {values['impact_desc']}")
    if mitigation:
        parts.append(f"สถานะ: {MITIGATION_TEXT.get(mitigation, mitigation)}")

    return RiskStatement(
        title=title,
        description=" | ".join(parts),
        likelihood=likelihood,
        impact=impact,
        reasoning=f"Likelihood {likelihood}/5, Impact {impact}/5 (calculated from interview answers)",
    )


class RiskInterview:
    """Walks one question flow, one answer at a time."""

    def __init__(self, original_input: str, flow: Optional[str] = None):
        self.original_input = original_input
        self.selection = select_flow(original_input)
        self.flow = flow or self.selection.flow
        if self.flow not in QUESTION_TEMPLATES:
            raise ValueError(f"Unknown interview flow: {self.flow}")
        self.questions = QUESTION_TEMPLATES[self.flow]
        self.answers: Dict[str, Answer] = {}
        logger.debug(f"Interview started: flow={self.flow}, confidence={self.selection.confidence}")

    @property
    def current_question(self) -> Optional[InterviewQuestion]:
        for question in self.questions:
            if question.id not in self.answers:
                return question
        return None

    @property
    def is_complete(self) -> bool:
        return self.current_question is None

    def answer(self, answer: Answer) -> Optional[InterviewQuestion]:
        """
        Records an answer to the current question.

        Returns:
            The next question, or None when the interview is complete.

        Raises:
            InvalidAnswerError: interview already complete, wrong answer type,
                or a choice outside the question's options.
        """
        question = self.current_question
        if question is None:
            raise InvalidAnswerError("Interview is already complete")
        check_answer(question, answer)
        self.answers[question.id] = answer
        return self.current_question

    def statement(self) -> RiskStatement:
        return generate_statement(self.original_input, self.answers, flow=self.flow)
