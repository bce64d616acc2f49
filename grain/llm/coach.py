from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from openai import OpenAI

from grain.config import Settings, load_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Grain, a Canada-first personal finance guide. You know the user's monthly budget, debts, and goals.\n"
    "Keep replies short (3-6 sentences), actionable, and warm. Prioritise Canadian accounts (FHSA, TFSA, RRSP, RESP).\n"
    "If the user is dealing with debt, emphasise high-interest payoff before aggressive investing.\n"
    "Suggest next steps or clarification questions when useful. "
    "Format with short paragraphs or bullet lists when it improves clarity."
)

UNAVAILABLE_MESSAGE = (
    "The AI coach is currently offline. Add an OPENAI_API_KEY environment variable to re-enable it."
)
EMPTY_REPLY_MESSAGE = "Grain could not craft a reply. Please try again."
UPSTREAM_MESSAGE = "Grain ran into an unexpected issue while talking to OpenAI."


class CoachError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CoachUnavailableError(CoachError):
    """No API credential configured."""

    status_code = 503


class CoachUpstreamError(CoachError):
    status_code = 502


class CoachEmptyReplyError(CoachError):
    status_code = 500


_client_cache: Dict[tuple, OpenAI] = {}


def get_openai_client(settings: Settings) -> Optional[OpenAI]:
    """One client per (key, timeout); None when no key is configured."""
    if not settings.openai_api_key:
        return None
    cache_key = (settings.openai_api_key, settings.chat_timeout_seconds)
    client = _client_cache.get(cache_key)
    if client is None:
        client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.chat_timeout_seconds,
            max_retries=0,
        )
        _client_cache[cache_key] = client
    return client


def build_chat_messages(messages: Sequence[Dict[str, str]], context: Optional[str]) -> List[Dict[str, str]]:
    system = SYSTEM_PROMPT
    if context and context.strip():
        system = f"{system}\n\nContext:\n{context.strip()}"
    out = [{"role": "system", "content": system}]
    for m in messages:
        out.append({"role": m["role"], "content": m["text"]})
    return out


def _extract_reply(resp: Any) -> str:
    choices = getattr(resp, "choices", None)
    if choices:
        msg = getattr(choices[0], "message", None)
        content = getattr(msg, "content", None) if msg is not None else None
        if content:
            return content.strip()
    return ""


def ask_coach(
    messages: Sequence[Dict[str, str]],
    context: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or load_settings()
    client = get_openai_client(settings)
    if client is None:
        raise CoachUnavailableError(UNAVAILABLE_MESSAGE)

    chat_messages = build_chat_messages(messages, context)
    try:
        resp = client.chat.completions.create(
            model=settings.chat_model,
            messages=chat_messages,
            temperature=settings.chat_temperature,
        )
    except Exception as e:
        logger.error("ask-grain upstream error: %s", e)
        raise CoachUpstreamError(str(e) or UPSTREAM_MESSAGE) from e

    reply = _extract_reply(resp)
    if not reply:
        logger.warning("ask-grain got an empty completion from %s", settings.chat_model)
        raise CoachEmptyReplyError(EMPTY_REPLY_MESSAGE)
    return reply
