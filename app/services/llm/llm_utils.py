# app/services/llm/llm_utils.py
import re
from typing import Any, Optional, Tuple

from app.models.llm_models import ModelCandidate

# Tried in order; the first candidate that answers wins.
MODEL_CANDIDATES: Tuple[ModelCandidate, ...] = (
    ModelCandidate(api_version="v1beta", model_id="gemini-2.5-flash"),
    ModelCandidate(api_version="v1beta", model_id="gemini-flash-latest"),
    ModelCandidate(api_version="v1beta", model_id="gemini-2.0-flash"),
    ModelCandidate(api_version="v1", model_id="gemini-1.5-flash"),
)

# Substring of the upstream error text -> hint shown instead of the raw message.
# Checked top to bottom, so more specific patterns go first.
UPSTREAM_ERROR_HINTS: Tuple[Tuple[str, str], ...] = (
    ("limit: 0", "Quota for this model is 0 on the current key. Enable billing or pick a free-tier model."),
    ("quota", "Quota exceeded. Wait for the quota window to reset or raise the limit."),
    ("resource_exhausted", "Quota exceeded. Wait for the quota window to reset or raise the limit."),
    ("location is not supported", "The API is not available in the server's region."),
)

_FENCE_OPEN = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```$")


def classify_upstream_error(message: str) -> str:
    """Map a raw upstream error message to an actionable hint, if one matches."""
    lowered = (message or "").lower()
    for needle, hint in UPSTREAM_ERROR_HINTS:
        if needle in lowered:
            return hint
    return message or "Unknown upstream error"


def strip_code_fences(text: str) -> str:
    """
    Remove a wrapping ``` / ```json fence and surrounding whitespace.
    Text without a fence is returned stripped but otherwise untouched.
    """
    stripped = text.strip()
    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def extract_generated_text(response: Any) -> Optional[str]:
    """
    Pull the generated text out of a generateContent response.
    Returns None when there is no candidate or the first candidate has no text parts.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    texts = [part.text for part in parts if getattr(part, "text", None)]
    if not texts:
        return None
    return "".join(texts)


def truncate_diagnostic(message: str, max_length: int) -> str:
    if len(message) <= max_length:
        return message
    return message[:max_length].rstrip() + "..."
