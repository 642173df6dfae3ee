"""
Content moderation for submitted ideas.

Two layers:
- run_moderation(): offline word-boundary blocklist, always checked first.
- moderate_content(): asks the completion API whether the text suits a
  professional, creative AI-ideas community. Best-effort: if the call fails
  the content is allowed, and a non-JSON reply is judged by a keyword check.
"""

from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Tuple

from flask import current_app, has_app_context

from . import ai

logger = logging.getLogger(__name__)

# Only terms with no plausible use in an AI idea; topics like "hate speech
# detection" or "kill switch" are left to the model review.
# Uses word boundaries (\b) so "bombastic" or "terrorism" do not match.
_BLOCKLIST = [
    "suicide", "bomb", "murder", "terror", "nsfw", "porn",
]

_BLOCKLIST_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(term) for term in _BLOCKLIST) + r")\b",
    re.IGNORECASE,
)

DEFAULT_WARNING = "Please revise your content to be more appropriate for our community."

SYSTEM_PROMPT = """You are a content moderator for an AI idea sharing platform. Your task is to check if the given content is appropriate for a professional, creative, and inspiring community.

Rules:
- Content should be about AI, technology, innovation, or creative ideas
- No NSFW, sexual content, hate speech, violence, or illegal activities
- No spam, advertising, or promotional content
- No harmful, dangerous, or unethical suggestions
- Content should be constructive and positive

Respond with a JSON object:
{
  "isAppropriate": true/false,
  "reason": "Brief explanation if not appropriate",
  "warning": "User-friendly warning message if not appropriate"
}"""


def _log(level: int, message: str) -> None:
    if has_app_context():
        current_app.logger.log(level, message)
    else:
        logger.log(level, message)


def _config(key: str, default: Any) -> Any:
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def _allowed(reason: str = "") -> Dict[str, Any]:
    return {"is_appropriate": True, "warning": "", "reason": reason}


def run_moderation(text: str) -> Tuple[bool, str | None]:
    """
    Returns (allowed, reason). Word-boundary match against a tiny blocklist.
    This is intentionally minimal to avoid false positives.
    """
    t = text or ""
    match = _BLOCKLIST_PATTERN.search(t)
    if match:
        return False, f"contains disallowed content: “{match.group()}”"
    return True, None


def build_messages(content: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f'Please review this content for appropriateness: "{content}"'},
    ]


def interpret_reply(reply: str | None) -> Dict[str, Any]:
    """
    Turn the model reply into a verdict dict.

    - empty reply: allowed
    - JSON object: allowed only when isAppropriate is truthy (missing, null,
      0 or "false" block)
    - anything else: inappropriate iff it says "not appropriate"/"inappropriate"
    """
    if not reply:
        return _allowed()

    try:
        parsed = json.loads(reply)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        flag = parsed.get("isAppropriate")
        if isinstance(flag, str):
            is_appropriate = flag.strip().lower() not in ("", "false")
        else:
            is_appropriate = bool(flag)
        return {
            "is_appropriate": is_appropriate,
            "warning": str(parsed.get("warning") or ""),
            "reason": str(parsed.get("reason") or ""),
        }

    lowered = reply.lower()
    is_appropriate = "not appropriate" not in lowered and "inappropriate" not in lowered
    return {
        "is_appropriate": is_appropriate,
        "warning": "" if is_appropriate else DEFAULT_WARNING,
        "reason": "",
    }


def moderate_content(content: str) -> Dict[str, Any]:
    """
    Ask the completion API to review ``content``.

    Returns a dict with ``is_appropriate`` (bool), ``warning`` and ``reason``
    (strings, empty when allowed). Never raises: provider errors allow the
    content through and are logged.
    """
    if not _config("MODERATION_ENABLED", True):
        return _allowed()

    try:
        reply = ai.complete_chat(
            build_messages(content),
            temperature=_config("MODERATION_TEMPERATURE", 0.3),
            max_tokens=_config("MODERATION_MAX_TOKENS", 200),
        )
    except Exception as e:
        # Allow content if moderation fails
        _log(logging.ERROR, f"Content moderation error: {e}")
        return _allowed()

    if reply is None and ai.AI_LAST_ERROR:
        _log(logging.INFO, f"Content moderation skipped: {ai.AI_LAST_ERROR}")

    return interpret_reply(reply)


def check_submission(text: str) -> Dict[str, Any]:
    """
    Full moderation pass for a submission: blocklist first, then the API.

    The blocklist verdict short-circuits so obviously bad text never leaves
    the server.
    """
    allowed, reason = run_moderation(text)
    if not allowed:
        return {"is_appropriate": False, "warning": DEFAULT_WARNING, "reason": reason or ""}
    return moderate_content(text)
