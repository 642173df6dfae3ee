"""
Ideas service.

Handles creating and listing idea entries stored in the ai_ideas table, and
the in-memory tag helpers used for filtering the board.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List, Iterable, Tuple
import json
import logging
from flask import current_app, has_app_context
from ideaboard.constants import IDEAS_TABLE
from ideaboard.services.supabase_client import get_client, get_write_client

logger = logging.getLogger(__name__)


def _safe_log_error(message: str) -> None:
    """Safely log an error, handling cases where no app context exists."""
    if has_app_context():
        current_app.logger.error(message)
    else:
        logger.error(message)


def _normalize_tags(value: Any) -> List[str]:
    """Tags come back as an array, or as a JSON-encoded string from older rows."""
    if isinstance(value, list):
        return [t for t in value if isinstance(t, str)]
    if isinstance(value, str) and value:
        try:
            decoded = json.loads(value)
        except ValueError:
            return []
        if isinstance(decoded, list):
            return [t for t in decoded if isinstance(t, str)]
    return []


def format_idea(row: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a datastore row with ``tags`` always a list."""
    idea = dict(row)
    idea["tags"] = _normalize_tags(row.get("tags"))
    return idea


def list_ideas() -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """
    Get every visible idea (approved and not flagged NSFW), newest first.

    Returns:
        (ideas, error_message)
    """
    supabase = get_client()
    if not supabase:
        return [], "Database not configured"

    try:
        response = supabase.table(IDEAS_TABLE) \
            .select("*") \
            .eq("is_approved", True) \
            .eq("is_nsfw", False) \
            .order("created_at", desc=True) \
            .execute()

        return [format_idea(row) for row in (response.data or [])], None

    except Exception as e:
        _safe_log_error(f"Error fetching ideas: {e}")
        return [], f"Error fetching ideas: {str(e)}"


def create_idea(
    title: str,
    description: str,
    category: str,
    tags: Optional[List[str]] = None,
    author_name: Optional[str] = None,
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Insert a new idea.

    Ideas are auto-approved: callers run validation and moderation first.

    Args:
        title: Idea title
        description: Idea description
        category: One of constants.CATEGORIES
        tags: Optional list of tags
        author_name: Optional display name (None = anonymous)

    Returns:
        (idea_dict, error_message)
    """
    supabase = get_write_client()
    if not supabase:
        return None, "Database not configured"

    try:
        idea_data = {
            "title": title,
            "description": description,
            "category": category,
            "tags": tags or [],
            "author_name": author_name or None,
            "is_approved": True,
            "is_nsfw": False,
        }

        response = supabase.table(IDEAS_TABLE).insert(idea_data).execute()

        if response.data:
            return format_idea(response.data[0]), None
        return None, "Failed to create idea"

    except Exception as e:
        _safe_log_error(f"Error creating idea: {e}")
        return None, f"Error creating idea: {str(e)}"


def collect_tags(ideas: Iterable[Dict[str, Any]]) -> List[str]:
    """Sorted unique tags across all ideas."""
    tags = set()
    for idea in ideas:
        tags.update(idea.get("tags") or [])
    return sorted(tags)


def filter_by_tags(ideas: List[Dict[str, Any]], selected: Iterable[str]) -> List[Dict[str, Any]]:
    """
    Keep ideas carrying at least one of the selected tags.

    An empty selection keeps everything. Matching is exact (case-sensitive),
    the same strings shown as filter chips.
    """
    wanted = {t for t in selected if t}
    if not wanted:
        return list(ideas)
    return [idea for idea in ideas if wanted.intersection(idea.get("tags") or [])]
