"""
Error handling utilities for sanitizing user-facing messages and logging.

Provides consistent error handling across the application:
- Sanitizes error messages to prevent information leakage
- Logs detailed error information for debugging
- Provides user-friendly error messages
"""

from __future__ import annotations
from flask import current_app

# User-friendly generic error messages
GENERIC_MESSAGES = {
    "validation": "The information provided is invalid. Please check and try again.",
    "fetch_ideas": "Failed to fetch ideas",
    "create_idea": "Failed to create idea",
}

# Shown when an unknown error_type is passed
DEFAULT_MESSAGE = "Something went wrong. Please try again."


def sanitize_error(
    error: Exception,
    error_type: str,
    log_prefix: str = ""
) -> str:
    """
    Sanitize error message for user display and log full details.

    Security: Prevents exposing internal error messages, stack traces, or
    datastore details to end users. Full details are logged for debugging.

    Args:
        error: The exception that occurred
        error_type: Key into GENERIC_MESSAGES
        log_prefix: Optional prefix for log message context

    Returns:
        User-friendly error message

    Examples:
        >>> try:
        ...     ideas, error = list_ideas()
        ... except Exception as e:
        ...     user_msg = sanitize_error(e, "fetch_ideas", "Listing ideas failed")
    """
    error_message = str(error)
    log_message = f"{log_prefix}: {error_message}" if log_prefix else error_message

    if error_type == "validation":
        # Expected errors (user mistakes), log as info
        current_app.logger.info(f"Expected error - {log_message}")
    else:
        current_app.logger.error(f"Unexpected error - {log_message}", exc_info=True)

    return GENERIC_MESSAGES.get(error_type, DEFAULT_MESSAGE)


def log_warning(message: str, **context) -> None:
    """
    Log a warning with optional context.

    Examples:
        >>> log_warning("Submission blocked by moderation", client="203.0.113.7")
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} | Context: {context_str}"

    current_app.logger.warning(message)


def log_info(message: str, **context) -> None:
    """
    Log an info message with optional context.

    Examples:
        >>> log_info("Idea created", idea_id="42", category="Education")
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} | Context: {context_str}"

    current_app.logger.info(message)
