"""Stage 1: Transcript Segmentation - turns and candidate statements.

Input is either a flat transcript with ``role: content`` line prefixes or an
already-structured message history. Only user turns feed field detection;
assistant turns are kept for transcript reconstruction.
"""

import re
from dataclasses import dataclass, field

import structlog

from prompt_brief.models import ChatMessage, MessageRole

logger = structlog.get_logger(__name__)


# Role prefix on a stripped line, e.g. "User: ..." or "assistant:"
ROLE_PREFIX_PATTERN = re.compile(r"^(user|assistant)\s*:\s*(.*)$", re.IGNORECASE)

# Newlines, bullet markers, numbered-list markers, semicolons
STATEMENT_SPLIT_PATTERN = re.compile(r"\n|[•*-]\s+|\d+\.\s+|;+")

WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass
class ConversationTurn:
    """One role's contiguous contribution."""
    role: MessageRole
    content: str


@dataclass
class Statement:
    """A candidate statement inside a user turn."""
    text: str
    turn_index: int
    statement_index: int
    normalized: str = field(init=False)

    def __post_init__(self) -> None:
        self.normalized = normalize_text(self.text)


def normalize_text(text: str) -> str:
    """Lower-case, collapse whitespace and trim."""
    return WHITESPACE_PATTERN.sub(" ", text.lower()).strip()


def split_turns(transcript: str) -> list[ConversationTurn]:
    """Reconstruct role turns from a flat transcript.

    Continuation lines are buffered into the current turn and flushed on the
    next role marker. Lines before the first marker are dropped. Without any
    marker, non-empty text becomes a single user turn.
    """
    turns: list[ConversationTurn] = []
    current_role: MessageRole | None = None
    buffer: list[str] = []
    saw_marker = False

    def flush() -> None:
        if current_role is None:
            return
        content = "\n".join(buffer).strip()
        if content:
            turns.append(ConversationTurn(role=current_role, content=content))

    for raw_line in transcript.splitlines():
        match = ROLE_PREFIX_PATTERN.match(raw_line.strip())
        if match:
            flush()
            saw_marker = True
            current_role = MessageRole(match.group(1).lower())
            buffer = [match.group(2)]
            continue

        if current_role is not None:
            buffer.append(raw_line)

    flush()

    if not saw_marker and transcript.strip():
        return [ConversationTurn(role=MessageRole.USER, content=transcript.strip())]

    return turns


def turns_from_messages(messages: list[ChatMessage]) -> list[ConversationTurn]:
    """Use validated message history directly as turns, skipping empty content."""
    return [
        ConversationTurn(role=message.role, content=message.content.strip())
        for message in messages
        if message.content.strip()
    ]


def split_statements(text: str) -> list[str]:
    """Split a turn body into trimmed, non-empty statements."""
    return [part.strip() for part in STATEMENT_SPLIT_PATTERN.split(text) if part.strip()]


def segment_statements(turns: list[ConversationTurn]) -> list[Statement]:
    """Produce ordered statements for every user turn.

    ``turn_index`` counts user turns only.
    """
    user_turns = [turn for turn in turns if turn.role == MessageRole.USER]

    statements = [
        Statement(text=text, turn_index=turn_index, statement_index=statement_index)
        for turn_index, turn in enumerate(user_turns)
        for statement_index, text in enumerate(split_statements(turn.content))
    ]

    logger.debug(
        "segmentation_complete",
        turns=len(turns),
        user_turns=len(user_turns),
        statements=len(statements),
    )
    return statements
