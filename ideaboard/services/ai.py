"""
Completion client (OpenAI primary, Gemini fallback).

Wraps a LiteLLM Router so the rest of the app can ask for a single chat
completion without caring which provider answers. Failures never raise out
of complete_chat(); the last error is kept for logs and the CLI.
"""

from __future__ import annotations
import os
from typing import Dict, List, Optional, Tuple

from flask import current_app, has_app_context

# Most recent AI error (surfaced by the CLI to help diagnose model/key issues)
AI_LAST_ERROR: Optional[str] = None

# Track which AI provider answered the last successful call
AI_LAST_PROVIDER: Optional[str] = None

# Cache for LiteLLM Router to avoid recreating on every request
_ROUTER_CACHE: Optional[object] = None

PRIMARY_MODEL = "primary-gpt"
FALLBACK_MODEL = "fallback-gemini"


def _clear_router_cache():
    """Clear the router cache. Used for testing and when API keys change."""
    global _ROUTER_CACHE
    _ROUTER_CACHE = None


def _api_keys() -> Tuple[Optional[str], Optional[str]]:
    """Read API keys from environment first, then from the app config."""
    openai_key = os.getenv("OPENAI_API_KEY")
    gemini_key = os.getenv("GEMINI_API_KEY")

    if not openai_key and has_app_context():
        openai_key = current_app.config.get("OPENAI_API_KEY")
    if not gemini_key and has_app_context():
        gemini_key = current_app.config.get("GEMINI_API_KEY")

    return openai_key or None, gemini_key or None


def _get_litellm_router():
    """
    Returns (router, None) with OpenAI (primary) and Gemini (fallback), or
    (None, error) if neither API key is available.

    The router is cached to avoid recreation on every request.
    """
    global _ROUTER_CACHE

    if _ROUTER_CACHE is not None:
        return _ROUTER_CACHE, None

    openai_key, gemini_key = _api_keys()

    if not openai_key and not gemini_key:
        return None, "Neither OPENAI_API_KEY nor GEMINI_API_KEY configured"

    try:
        from litellm import Router

        model_list = []
        fallbacks = {}

        if openai_key:
            model_list.append({
                "model_name": PRIMARY_MODEL,
                "litellm_params": {
                    "model": "gpt-4o-mini",
                    "api_key": openai_key,
                },
            })

        if gemini_key:
            model_list.append({
                "model_name": FALLBACK_MODEL,
                "litellm_params": {
                    "model": "gemini/gemini-flash-latest",
                    "api_key": gemini_key,
                },
            })

        # Configure fallback chain: OpenAI -> Gemini
        if openai_key and gemini_key:
            fallbacks = [{PRIMARY_MODEL: [FALLBACK_MODEL]}]

        # Moderation is best-effort: a single attempt with a short timeout
        router = Router(
            model_list=model_list,
            fallbacks=fallbacks if fallbacks else None,
            num_retries=0,
            timeout=15,
        )

        _ROUTER_CACHE = router
        return router, None
    except Exception as e:
        return None, f"LiteLLM Router initialization error: {e}"


def is_configured() -> bool:
    """True when at least one provider key is available."""
    openai_key, gemini_key = _api_keys()
    return bool(openai_key or gemini_key)


def complete_chat(
    messages: List[Dict[str, str]],
    temperature: float = 0.3,
    max_tokens: int = 200,
) -> Optional[str]:
    """
    Run one chat completion and return the stripped reply text.

    Returns None when no provider is configured or the reply is empty.
    Provider/network exceptions propagate so callers can choose their own
    failure policy.
    """
    global AI_LAST_ERROR, AI_LAST_PROVIDER
    AI_LAST_ERROR = None
    AI_LAST_PROVIDER = None

    router, err = _get_litellm_router()
    if not router:
        AI_LAST_ERROR = err or "AI Router initialization failed"
        return None

    openai_key, _gemini_key = _api_keys()
    model_to_use = PRIMARY_MODEL if openai_key else FALLBACK_MODEL

    try:
        resp = router.completion(
            model=model_to_use,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except Exception as e:
        AI_LAST_ERROR = str(e)[:300]
        raise

    txt = (resp.choices[0].message.content or "").strip() if resp.choices else ""
    if not txt:
        AI_LAST_ERROR = "Empty response from AI providers"
        return None

    model_used = getattr(resp, "model", None) or model_to_use
    AI_LAST_PROVIDER = "gemini" if "gemini" in model_used.lower() else "openai"
    return txt
