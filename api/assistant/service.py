"""
Assistant orchestration.

Flow (global chat):
1) Load the user's most recently updated entries
2) Build a compact journal digest for the system prompt
3) Append sanitized client-side history and the new message
4) Ask the chat-completion API for one answer

Any LLM failure surfaces as HTTP 503 "AI assistant is unavailable."; there
are no retries.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg
from fastapi import HTTPException

from core import config, llm
from entries import repository as entries_repository
from entries import service as entries_service

from . import prompts

logger = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "AI assistant is unavailable."


def llm_base_url() -> str:
    return config.env_str("LLM_BASE_URL", "https://api.groq.com/openai/v1")


def llm_api_key() -> str:
    return config.env_str("LLM_API_KEY", "")


def llm_model() -> str:
    return config.env_str("LLM_MODEL", "llama-3.1-8b-instant")


def llm_timeout_s() -> float:
    return config.env_float("LLM_TIMEOUT_S", 60.0)


def llm_temperature() -> float:
    return config.env_float("LLM_TEMPERATURE", 0.3)


def llm_max_output_tokens() -> int:
    return config.env_int("LLM_MAX_OUTPUT_TOKENS", 600)


def history_messages_limit() -> int:
    return config.env_int("ASSISTANT_HISTORY_MESSAGES", 10)


def context_entries_limit() -> int:
    return config.env_int("ASSISTANT_CONTEXT_ENTRIES", 20)


def summary_input_chars() -> int:
    return config.env_int("ASSISTANT_SUMMARY_INPUT_CHARS", 12000)


def build_history_messages(
    history: list[dict[str, Any]],
    *,
    current_message: str,
    limit: int,
) -> list[dict[str, str]]:
    """
    Keep user/assistant turns with content, newest `limit` only.

    The web client appends the current message to its history before sending,
    so a trailing duplicate of it is dropped.
    """
    messages: list[dict[str, str]] = []
    for item in history or []:
        if not isinstance(item, dict):
            continue
        role = str(item.get("role") or "").strip()
        if role not in {"user", "assistant"}:
            continue
        content = str(item.get("content") or "").strip()
        if not content:
            continue
        messages.append({"role": role, "content": content})

    if messages and messages[-1] == {"role": "user", "content": current_message}:
        messages.pop()

    if limit <= 0:
        return []
    return messages[-limit:]


def build_journal_digest(rows: list[dict[str, Any]], *, max_note_chars: int = 160) -> str:
    if not rows:
        return "(no entries yet)"

    lines: list[str] = []
    for row in rows:
        entry = entries_service.to_entry_row(row)
        note = " ".join(entry["notes_markdown"].split())
        if len(note) > max_note_chars:
            note = note[: max_note_chars - 3].rstrip() + "..."
        flags = " [needs revision]" if entry["needs_revision"] else ""
        tags = f" tags={','.join(entry['tags'])}" if entry["tags"] else ""
        lines.append(
            f"- {entry['learning_date']} | {entry['category_name']} | {entry['title']} "
            f"(difficulty {entry['difficulty_level']}/5){flags}{tags}: {note}"
        )
    return "\n".join(lines)


async def _complete(messages: list[dict[str, str]], *, purpose: str) -> str:
    try:
        return await llm.chat_messages(
            base_url=llm_base_url(),
            api_key=llm_api_key(),
            model=llm_model(),
            messages=messages,
            timeout_s=llm_timeout_s(),
            temperature=llm_temperature(),
            max_output_tokens=llm_max_output_tokens(),
        )
    except llm.LLMError as exc:
        logger.warning("assistant_unavailable purpose=%s error=%s", purpose, exc)
        raise HTTPException(status_code=503, detail=UNAVAILABLE_DETAIL) from exc


async def summarize(content: str) -> dict[str, str]:
    content = (content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Nothing to summarize.")

    summary = await _complete(
        [
            {"role": "system", "content": prompts.summarize_system_prompt()},
            {"role": "user", "content": prompts.summarize_user_prompt(content[: summary_input_chars()])},
        ],
        purpose="summarize",
    )
    return {"summary": summary}


async def global_chat(
    message: str,
    history: list[dict[str, Any]],
    *,
    user_id: int,
) -> dict[str, str]:
    message = (message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is empty.")

    try:
        recent = await entries_repository.list_recent_entries(
            user_id=user_id,
            limit=max(0, min(context_entries_limit(), 100)),
        )
    except asyncpg.PostgresError as exc:
        logger.error("assistant_db_error user_id=%s error=%s", user_id, exc)
        raise HTTPException(status_code=500, detail="Failed to fetch entries.") from exc

    chat: list[dict[str, str]] = [
        {"role": "system", "content": prompts.chat_system_prompt(build_journal_digest(recent))}
    ]
    chat.extend(
        build_history_messages(
            history,
            current_message=message,
            limit=max(0, min(history_messages_limit(), 50)),
        )
    )
    chat.append({"role": "user", "content": message})

    text = await _complete(chat, purpose="global_chat")
    return {"text": text}
