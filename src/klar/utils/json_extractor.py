"""
JSON extraction for LLM responses.

Models asked for JSON sometimes wrap it in a markdown code fence or add a
sentence around it. The helpers here recover the object.
"""

import json
import re
from typing import Any, Dict, Optional

from loguru import logger

FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)```", re.DOTALL)


def extract_json_from_response(raw_response: str) -> Optional[Dict[str, Any]]:
    """
    Extract a JSON object from an LLM response.

    Handles:
    - ```json code blocks
    - ``` code blocks without language
    - Raw JSON objects embedded in text

    Args:
        raw_response: The raw text response from an LLM

    Returns:
        Parsed JSON object, or None if nothing usable was found
    """
    if not raw_response:
        return None

    text = raw_response.strip()

    fence = FENCE_PATTERN.search(text)
    if fence:
        text = fence.group(1).strip()

    # First { to last }
    brace_start = text.find('{')
    brace_end = text.rfind('}')
    if brace_start < 0 or brace_end <= brace_start:
        return None

    json_str = text[brace_start:brace_end + 1]
    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.debug(f"JSON parse error: {e}")
        parsed = _try_repair_and_parse(json_str)

    return parsed if isinstance(parsed, dict) else None


def _try_repair_and_parse(json_str: str) -> Optional[Any]:
    """Retry after removing trailing commas and stray control characters."""
    repaired = re.sub(r',\s*([}\]])', r'\1', json_str)
    repaired = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f]', '', repaired)

    try:
        return json.loads(repaired)
    except json.JSONDecodeError:
        return None
