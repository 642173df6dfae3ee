"""
Flask CLI commands for quick inspection from a shell.

Usage:
    flask list-ideas                       # All visible ideas
    flask list-ideas --tag AI --tag NLP    # Ideas carrying any of the tags
    flask moderate-text "Some idea text"   # Blocklist + model verdict
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext


@click.command("list-ideas")
@click.option("--tag", "tags", multiple=True,
              help="Only show ideas carrying this tag (repeatable; any match).")
@with_appcontext
def list_ideas_command(tags: tuple[str, ...]) -> None:
    """Print visible ideas, newest first."""
    from ideaboard.services import ideas

    items, error = ideas.list_ideas()
    if error:
        click.echo(f"Error: {error}")
        raise SystemExit(1)

    shown = ideas.filter_by_tags(items, tags)
    if not shown:
        click.echo("No ideas found.")
        return

    for idea in shown:
        tag_str = ", ".join(idea.get("tags") or []) or "-"
        author = idea.get("author_name") or "Anonymous"
        click.echo(f"[{idea.get('category')}] {idea.get('title')} ({author}) tags: {tag_str}")

    click.echo(f"\n{len(shown)} of {len(items)} idea(s).")


@click.command("moderate-text")
@click.argument("text")
@with_appcontext
def moderate_text_command(text: str) -> None:
    """Run the moderation pipeline on TEXT and print the verdict."""
    from ideaboard.services import ai
    from ideaboard.services.moderation import run_moderation, moderate_content

    allowed, reason = run_moderation(text)
    if not allowed:
        click.echo(f"Blocked by blocklist: {reason}")
        return

    if not ai.is_configured():
        click.echo("No completion API key configured; remote check is skipped (content allowed).")

    result = moderate_content(text)
    verdict = "appropriate" if result["is_appropriate"] else "NOT appropriate"
    click.echo(f"Verdict: {verdict}")
    if result.get("reason"):
        click.echo(f"Reason: {result['reason']}")
    if result.get("warning"):
        click.echo(f"Warning: {result['warning']}")
    if ai.AI_LAST_ERROR:
        click.echo(f"Last AI error: {ai.AI_LAST_ERROR}")
