"""Parsers for unstructured text: prose blobs and line-oriented chat pastes."""

import re
from dataclasses import dataclass
from enum import StrEnum

from ..constants import MAX_SPEAKER_LENGTH, MAX_UTTERANCES, SourceKind
from ..models import ParseResult, Utterance
from .base import build_result, is_usable_text, optional_text

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


class ChatLineKind(StrEnum):
    """Which chat-line pattern matched a line."""

    BOTH = "both"  # [timestamp] speaker: message
    SPEAKER_ONLY = "speaker_only"  # speaker: message
    TIMESTAMP_ONLY = "timestamp_only"  # [timestamp] message
    NO_MATCH = "no_match"


@dataclass(frozen=True)
class ChatLine:
    """Result of matching one chat line against the chat-line patterns."""

    kind: ChatLineKind
    text: str
    speaker: str | None = None
    timestamp: str | None = None


_SPEAKER = rf"(?P<speaker>[^\s:\[\]][^:\[\]]{{0,{MAX_SPEAKER_LENGTH - 1}}})"

# Evaluated in order; the first match wins.
CHAT_LINE_PATTERNS: tuple[tuple[ChatLineKind, re.Pattern[str]], ...] = (
    (
        ChatLineKind.BOTH,
        re.compile(rf"^\[(?P<timestamp>[^\]]+)\]\s*{_SPEAKER}:\s+(?P<text>.+)$"),
    ),
    (
        ChatLineKind.SPEAKER_ONLY,
        re.compile(rf"^{_SPEAKER}:\s+(?P<text>.+)$"),
    ),
    (
        ChatLineKind.TIMESTAMP_ONLY,
        re.compile(r"^\[(?P<timestamp>[^\]]+)\]\s*(?P<text>.+)$"),
    ),
)


def match_chat_line(line: str) -> ChatLine:
    """Match a chat line against the chat-line patterns in priority order.

    Args:
        line: A single non-blank line.

    Returns:
        ChatLine: The first successful match, or a NO_MATCH line carrying
            the raw line as text.
    """
    stripped = line.strip()
    for kind, pattern in CHAT_LINE_PATTERNS:
        match = pattern.match(stripped)
        if match is None:
            continue
        groups = match.groupdict()
        return ChatLine(
            kind=kind,
            text=groups["text"].strip(),
            speaker=optional_text(groups.get("speaker")),
            timestamp=optional_text(groups.get("timestamp")),
        )
    return ChatLine(kind=ChatLineKind.NO_MATCH, text=stripped)


def parse_chat_text(text: str) -> ParseResult:
    """Parse a line-oriented chat paste.

    Only the first 100 non-blank lines are considered; ``truncated`` is set
    when more existed. Each line keeps its position among non-blank lines
    as index.

    Args:
        text: Pasted chat text.

    Returns:
        ParseResult: One utterance per usable line.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    truncated = len(lines) > MAX_UTTERANCES

    utterances: list[Utterance] = []
    skipped = 0
    for position, line in enumerate(lines[:MAX_UTTERANCES]):
        chat_line = match_chat_line(line)
        if not is_usable_text(chat_line.text):
            skipped += 1
            continue
        utterances.append(
            Utterance(
                text=chat_line.text,
                index=position,
                speaker=chat_line.speaker,
                timestamp=chat_line.timestamp,
            )
        )

    return build_result(
        utterances=utterances,
        skipped=skipped,
        truncated=truncated,
        source_kind=SourceKind.CHAT_TEXT,
    )


def split_sentences(text: str) -> list[str]:
    """Split prose on sentence-ending punctuation followed by whitespace.

    A blob with no boundary comes back as a single sentence.
    """
    stripped = text.strip()
    if not stripped:
        return []
    return [sentence.strip() for sentence in SENTENCE_BOUNDARY.split(stripped)]


def parse_plain_text(text: str) -> ParseResult:
    """Parse an unstructured text blob into one utterance per sentence."""
    utterances: list[Utterance] = []
    skipped = 0
    for position, sentence in enumerate(split_sentences(text)):
        if not is_usable_text(sentence):
            skipped += 1
            continue
        utterances.append(Utterance(text=sentence, index=position))

    return build_result(
        utterances=utterances,
        skipped=skipped,
        truncated=False,
        source_kind=SourceKind.PLAIN_TEXT,
    )
