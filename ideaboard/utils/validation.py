"""
Idea input validation and normalization.

Trims and bounds field lengths, strips control characters, parses the tag
list, and applies the lightweight spam rules used before moderation. Returns
a clean payload plus a list of user-facing error strings.
"""

from __future__ import annotations
import re
from typing import Any, Dict, List, Tuple

from ideaboard.constants import CATEGORIES

TITLE_MIN_LEN = 3
TITLE_MAX_LEN = 100
DESCRIPTION_MIN_LEN = 10
DESCRIPTION_MAX_LEN = 500
TAGS_INPUT_MAX_LEN = 100
AUTHOR_MAX_LEN = 50

# Lowercase substrings that mark a field as junk/spam.
_TITLE_BANNED = ("test", "spam")
_DESCRIPTION_BANNED = (
    "test", "spam", "asdf", "123", "xxx", "free money", "click here", "limited offer",
)
_TAG_BANNED = (
    "test", "spam", "xxx", "123", "free money", "limited offer", "click here",
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

COOLDOWN_MESSAGE = "Please wait before submitting another idea"


def _soft_sanitize(text: Any, max_len: int | None = None) -> str:
    """
    Free-text fields are permissive:
    - strip & optionally bound length
    - remove control chars only; keep reasonable punctuation
    - normalize repeated tabs/spaces
    """
    if not isinstance(text, str):
        return ""
    t = text.strip()
    if not t:
        return ""
    if max_len is not None:
        t = t[:max_len]
    t = _CONTROL_CHARS.sub("", t)
    t = re.sub(r"[ \t]{2,}", " ", t)
    return t


def _contains_any(text: str, needles: Tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(n in lowered for n in needles)


def parse_tags(raw: Any) -> List[str]:
    """
    Normalize the tags field into a list of strings.

    Accepts a comma-separated string ("AI, NLP") or a list. Pieces are
    trimmed, empties dropped and exact duplicates removed (first one wins).
    Any other type yields an empty list.
    """
    if isinstance(raw, str):
        pieces = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        pieces = [p for p in raw if isinstance(p, str)]
    else:
        return []

    tags: List[str] = []
    for piece in pieces:
        tag = _CONTROL_CHARS.sub("", piece).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def normalize_author(value: Any) -> str | None:
    """Blank author names are stored as NULL (displayed as anonymous)."""
    author = _soft_sanitize(value, AUTHOR_MAX_LEN)
    return author or None


def validate_idea(
    form: Dict[str, Any],
    cooldown_remaining: int = 0,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validates a submitted idea and returns (payload, errors).

    Field names follow the JSON API (``authorName``); the HTML form posts
    ``author_name`` and both are accepted. Length checks run on the trimmed
    text for minimums and on the raw text for maximums, so a pasted
    over-long description is reported rather than silently cut.

    ``cooldown_remaining`` is the number of seconds the caller still has to
    wait before another submission is accepted (0 = allowed).
    """
    errors: List[str] = []

    raw_title = form.get("title") if isinstance(form.get("title"), str) else ""
    raw_description = form.get("description") if isinstance(form.get("description"), str) else ""
    raw_category = form.get("category") if isinstance(form.get("category"), str) else ""
    raw_author = form.get("authorName", form.get("author_name"))

    title = _soft_sanitize(raw_title)
    description = _soft_sanitize(raw_description)
    category = raw_category.strip()
    tags = parse_tags(form.get("tags"))

    # Title
    if len(raw_title.strip()) < TITLE_MIN_LEN:
        errors.append(f"Title must be at least {TITLE_MIN_LEN} characters long")
    if len(raw_title) > TITLE_MAX_LEN:
        errors.append(f"Title must be less than {TITLE_MAX_LEN} characters")
    if raw_title and _contains_any(raw_title, _TITLE_BANNED):
        errors.append('Title cannot contain "test" or "spam"')

    # Description
    if len(raw_description.strip()) < DESCRIPTION_MIN_LEN:
        errors.append(f"Description must be at least {DESCRIPTION_MIN_LEN} characters long")
    if len(raw_description) > DESCRIPTION_MAX_LEN:
        errors.append(f"Description must be less than {DESCRIPTION_MAX_LEN} characters")
    if raw_description and _contains_any(raw_description, _DESCRIPTION_BANNED):
        errors.append("Description contains inappropriate content")

    # Category
    if category not in CATEGORIES:
        errors.append("Please select a valid category")

    # Tags
    if any(_contains_any(tag, _TAG_BANNED) for tag in tags):
        errors.append("Tags contain inappropriate content")

    if cooldown_remaining > 0:
        errors.append(COOLDOWN_MESSAGE)

    payload = {
        "title": title,
        "description": description,
        "category": category,
        "tags": tags,
        "author_name": normalize_author(raw_author),
    }
    return payload, errors


def moderation_text(payload: Dict[str, Any]) -> str:
    """Title, description and tags joined into the single text sent to moderation."""
    tags = " ".join(payload.get("tags") or [])
    return f"{payload.get('title', '')} {payload.get('description', '')} {tags}"
