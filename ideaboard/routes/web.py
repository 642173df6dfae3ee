"""
UI routes and request flow.

Serves the idea board, the submission form, and the submit flow:
validate (including the per-client cooldown), moderate, store. Keeps
templates simple by passing everything they need.
"""

from flask import Blueprint, render_template, request, redirect, url_for, current_app, flash
from ..constants import CATEGORIES, EXAMPLE_TAGS
from ..extensions import limiter
from ..services import ideas
from ..services.moderation import check_submission
from ..utils.cache import seconds_until_allowed, record_submission
from ..utils.errors import log_info, log_warning
from ..utils.validation import (
    validate_idea,
    moderation_text,
    TITLE_MAX_LEN,
    DESCRIPTION_MAX_LEN,
    TAGS_INPUT_MAX_LEN,
    AUTHOR_MAX_LEN,
)

web_bp = Blueprint("web", __name__)

FALLBACK_WARNING = "Please revise your content to be more appropriate."


def _client_key() -> str:
    return request.remote_addr or "unknown"


def _submit_rate():
    return current_app.config.get("RATELIMIT_SUBMIT", "5 per minute; 50 per day")


def _render_form(form_values=None, errors=None, warning=None, status=200):
    return render_template(
        "submit.html",
        categories=CATEGORIES,
        example_tags=EXAMPLE_TAGS,
        form_values=form_values or {},
        errors=errors or [],
        content_warning=warning,
        limits={
            "title": TITLE_MAX_LEN,
            "description": DESCRIPTION_MAX_LEN,
            "tags": TAGS_INPUT_MAX_LEN,
            "author": AUTHOR_MAX_LEN,
        },
    ), status


@limiter.exempt
@web_bp.route("/healthz")
def healthz():
    """Simple health endpoint to verify the server responds."""
    return "OK", 200


@web_bp.route("/")
def index():
    """
    The idea board.

    ?tag= may be repeated; ideas carrying any selected tag are shown. Tag
    chips link to the same page with that tag toggled.
    """
    items, error = ideas.list_ideas()
    if error:
        current_app.logger.error(f"Failed to fetch ideas: {error}")

    selected = [t for t in request.args.getlist("tag") if t]
    visible = ideas.filter_by_tags(items, selected)

    return render_template(
        "index.html",
        ideas=visible,
        total_count=len(items),
        all_tags=ideas.collect_tags(items),
        selected_tags=selected,
        load_failed=bool(error),
    )


@web_bp.route("/submit", methods=["GET"])
def submit_form():
    """Render the empty submission form."""
    return _render_form()


@web_bp.route("/submit", methods=["POST"])
@limiter.limit(_submit_rate)
def submit():
    """
    Handle a submission.

    Steps:
      1) Validate fields and the per-client cooldown
      2) Moderate title + description + tags
      3) Record the submission time and store the idea
    """
    form_values = {
        "title": request.form.get("title", ""),
        "description": request.form.get("description", ""),
        "category": request.form.get("category", ""),
        "tags": request.form.get("tags", ""),
        "author_name": request.form.get("author_name", ""),
    }

    client = _client_key()
    cooldown = current_app.config.get("SUBMISSION_COOLDOWN_SECONDS", 60)
    payload, errors = validate_idea(form_values, seconds_until_allowed(client, cooldown))

    if errors:
        return _render_form(form_values, errors=errors, status=400)

    verdict = check_submission(moderation_text(payload))
    if not verdict["is_appropriate"]:
        log_warning("Submission blocked by moderation", reason=verdict.get("reason") or "n/a")
        return _render_form(form_values, warning=verdict.get("warning") or FALLBACK_WARNING, status=422)

    record_submission(client, cooldown)

    idea, error = ideas.create_idea(
        title=payload["title"],
        description=payload["description"],
        category=payload["category"],
        tags=payload["tags"],
        author_name=payload["author_name"],
    )
    if error:
        current_app.logger.error(f"Failed to create idea: {error}")
        flash("Submission failed. Please try again later.", "error")
        return _render_form(form_values, status=500)

    log_info("Idea created", idea_id=idea.get("id"), category=idea.get("category"))
    flash("Idea submitted! Your AI idea has been submitted for review and will appear shortly.", "success")
    return redirect(url_for("web.index"))
