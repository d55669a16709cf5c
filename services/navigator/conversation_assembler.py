"""
Conversation Assembler

Stored message history -> ordered turns for the model client.
"""
from typing import Iterable, List

from llm_client import MODEL, USER, Turn

# Storage role -> model-client speaker token
ROLE_TO_SPEAKER = {
    "user": USER,
    "assistant": MODEL,
}


def assemble_turns(messages: Iterable) -> List[Turn]:
    """
    Map persisted messages to turns, preserving order and length.

    Assistant turns are re-tagged with the model token; user turns pass through.
    Any other stored role is a data error and raises ValueError.
    """
    turns = []
    for message in messages:
        try:
            speaker = ROLE_TO_SPEAKER[message.role]
        except KeyError:
            raise ValueError(f"Unknown message role: {message.role!r}") from None
        turns.append(Turn(speaker=speaker, text=message.content))
    return turns
