import json
import re
from typing import Any, Dict
from risklens.utils.logger import get_logger

logger = get_logger(__name__)


def safe_json_parse(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of LLM output, tolerating markdown fences,
    surrounding prose and raw control characters inside strings.

    Raises:
        json.JSONDecodeError: no JSON object could be recovered
    """
    if not text:
        return {}

    text = text.strip()

    # content of a fenced block, if any
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()

    # strict=False accepts literal newlines inside strings
    try:
        return json.loads(text, strict=False)
    except json.JSONDecodeError as e:
        logger.debug(f"Initial JSON parse failed: {e}. Attempting cleanup.")
        error = e

    text = re.sub(r'```json\s*|\s*```', '', text).strip()

    # everything between the first '{' and the last '}'
    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1], strict=False)
        except json.JSONDecodeError as inner_e:
            logger.debug(f"Cleanup extraction failed: {inner_e}")

    logger.error(f"JSON parsing failed after cleanup. Problematic text:\n{text[:500]}")
    raise error
