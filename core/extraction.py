# =============================================================================
# core/extraction.py  -  Pull one JSON payload out of free-form model text
# =============================================================================
#
# Generative models wrap their JSON in prose or markdown fences:
#
#     Sure! Here are your ideas:
#     ```json
#     [ {...}, {...} ]
#     ```
#
# extract_json() takes the greedy region from the FIRST opening bracket to
# the LAST matching closing bracket and parses it.  What happens when that
# fails is the caller's declared ExtractionPolicy:
#
#   STRICT   raise ExtractionError  -> the call returns an error envelope
#   LENIENT  return the caller's default (e.g. [] or {"clips": []})
#
# Each tool declares its policy in its adapter table (tools/adapters.py).
# =============================================================================

import copy
import enum
import json
import re
from typing import Any, Optional

from core.errors import ExtractionError

_PATTERNS = {
    "object": re.compile(r"\{[\s\S]*\}"),
    "array": re.compile(r"\[[\s\S]*\]"),
}

EXTRACTION_FAILED = "Failed to extract JSON from AI response"


class ExtractionPolicy(enum.Enum):
    STRICT = "strict"
    LENIENT = "lenient"


def find_json_region(text: str, kind: str) -> Optional[str]:
    """Return the greedy ``{...}`` or ``[...]`` substring, or None."""
    match = _PATTERNS[kind].search(text or "")
    return match.group(0) if match else None


def extract_json(
    text: str,
    kind: str,
    policy: ExtractionPolicy,
    default: Any = None,
    log=None,
) -> Any:
    """Parse the JSON ``kind`` ("object" or "array") embedded in ``text``.

    A region that is found but does not parse is treated exactly like a
    missing region.  LENIENT callers receive a fresh copy of ``default`` so
    they may mutate it.
    """
    region = find_json_region(text, kind)
    reason = "no JSON region found"
    if region is not None:
        try:
            return json.loads(region)
        except json.JSONDecodeError as exc:
            reason = f"JSON region did not parse: {exc.msg}"

    if policy is ExtractionPolicy.STRICT:
        raise ExtractionError(EXTRACTION_FAILED, {"reason": reason})

    if log is not None:
        log.warning("Falling back to default payload", meta={"reason": reason, "kind": kind})
    return copy.deepcopy(default)
