"""
Prompt builders for the journal assistant.
"""

from __future__ import annotations


def summarize_system_prompt() -> str:
    return (
        "You are a study assistant that condenses personal learning notes.\n"
        "Summarize the notes in at most five short markdown bullet points.\n"
        "Keep technical terms, formulas and code identifiers exact.\n"
        "Do not add facts that are not in the notes.\n"
        "Never use any emoji."
    )


def summarize_user_prompt(content: str) -> str:
    return (
        "Notes:\n"
        f"{content}\n\n"
        "Return only the bullet-point summary."
    )


def chat_system_prompt(journal_digest: str) -> str:
    """
    Global chat: the model sees a compact digest of the user's recent entries.
    """
    return (
        "You are the assistant inside a personal learning journal.\n"
        "Help the user review, connect and plan what they are learning.\n"
        "Use the journal digest below when the question is about their entries; "
        "otherwise answer from general knowledge and say so when unsure.\n"
        "Answer concisely in markdown. Never use any emoji.\n\n"
        "Journal digest (most recently updated first):\n"
        f"{journal_digest}"
    )
