"""
Defines JSON endpoints used by the front end and by scripted clients.

Endpoints:
- GET  /ideas:    Visible ideas, newest first (optional ?tag= filters)
- POST /ideas:    Create an idea
- GET  /tags:     Unique tags across visible ideas
- POST /moderate: Review a piece of text with the moderation model
"""

from flask import Blueprint, request, jsonify, current_app
from ..extensions import limiter
from ..services import ideas
from ..services.moderation import check_submission
from ..utils.errors import GENERIC_MESSAGES, sanitize_error, log_info
from ..utils.validation import parse_tags, normalize_author


api_bp = Blueprint("api", __name__)


@api_bp.before_request
def _enforce_ajax_for_mutations():
    """Enforce X-Requested-With header on all state-changing API requests.

    Custom headers cannot be set by cross-origin requests without CORS, and
    HTML forms cannot set them at all, so this stands in for CSRF tokens on
    the JSON API.
    """
    if request.method in ("POST", "PUT", "DELETE", "PATCH"):
        if request.headers.get("X-Requested-With") != "XMLHttpRequest":
            return jsonify({
                "error": "Invalid request. Please refresh the page and try again."
            }), 403


def _submit_rate():
    return current_app.config.get("RATELIMIT_SUBMIT", "5 per minute; 50 per day")


def _moderate_rate():
    return current_app.config.get("RATELIMIT_MODERATE", "20 per minute; 300 per day")


@api_bp.route("/ideas", methods=["GET"])
def list_ideas():
    """
    List visible ideas.

    Query params:
        tag (repeatable): keep ideas carrying at least one of these tags

    Returns:
        200: JSON list of ideas
        500: {"error": "Failed to fetch ideas"}
    """
    try:
        items, error = ideas.list_ideas()
        if error:
            current_app.logger.error(f"Supabase error: {error}")
            return jsonify({"error": GENERIC_MESSAGES["fetch_ideas"]}), 500

        selected = request.args.getlist("tag")
        return jsonify(ideas.filter_by_tags(items, selected))
    except Exception as e:
        return jsonify({"error": sanitize_error(e, "fetch_ideas", "Failed to fetch ideas")}), 500


@api_bp.route("/ideas", methods=["POST"])
@limiter.limit(_submit_rate)
def create_idea():
    """
    Create an idea.

    Request body (JSON):
        {
            "title": "...",
            "description": "...",
            "category": "...",
            "tags": ["AI", "NLP"] | "AI, NLP",
            "authorName": "..." (optional)
        }

    Returns:
        201: created idea
        400: {"error": "Title, description, and category are required"}
        500: {"error": "Failed to create idea"}
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    title = data.get("title")
    description = data.get("description")
    category = data.get("category")

    required = (title, description, category)
    if not all(isinstance(v, str) and v.strip() for v in required):
        return jsonify({"error": "Title, description, and category are required"}), 400

    try:
        idea, error = ideas.create_idea(
            title=title.strip(),
            description=description.strip(),
            category=category.strip(),
            tags=parse_tags(data.get("tags")),
            author_name=normalize_author(data.get("authorName")),
        )
        if error:
            current_app.logger.error(f"Supabase error: {error}")
            return jsonify({"error": GENERIC_MESSAGES["create_idea"]}), 500

        log_info("Idea created", idea_id=idea.get("id"), category=idea.get("category"))
        return jsonify(idea), 201
    except Exception as e:
        return jsonify({"error": sanitize_error(e, "create_idea", "Failed to create idea")}), 500


@api_bp.route("/tags", methods=["GET"])
def list_tags():
    """Sorted unique tags across visible ideas (used to build filter chips)."""
    items, error = ideas.list_ideas()
    if error:
        current_app.logger.error(f"Supabase error: {error}")
        return jsonify({"error": GENERIC_MESSAGES["fetch_ideas"]}), 500
    return jsonify(ideas.collect_tags(items))


@api_bp.route("/moderate", methods=["POST"])
@limiter.limit(_moderate_rate)
def moderate():
    """
    Review text for appropriateness.

    Request body (JSON):
        {"content": "..."}

    Returns:
        200: {"isAppropriate": bool, "warning": "...", "reason": "..."}
        400: {"error": "Content is required"}

    Runs the same checks as the submit form: the offline blocklist first,
    then the model. Model failures never block (isAppropriate=true).
    """
    data = request.get_json(silent=True)
    content = data.get("content") if isinstance(data, dict) else None

    if not content or not isinstance(content, str):
        return jsonify({"error": "Content is required"}), 400

    result = check_submission(content)
    payload = {
        "isAppropriate": result["is_appropriate"],
        "warning": result["warning"],
    }
    if result.get("reason"):
        payload["reason"] = result["reason"]
    return jsonify(payload)
