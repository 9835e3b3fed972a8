"""Parsers turning raw transcripts into utterance sequences."""

from collections.abc import Callable
from pathlib import Path

from loguru import logger

from ..constants import SUFFIX_SOURCE_KINDS, LogMessage, SourceKind
from ..errors import UnsupportedFormatError
from ..models import ParseResult
from .base import decode_input
from .structured import parse_csv, parse_json
from .text import ChatLine, ChatLineKind, match_chat_line, parse_chat_text, parse_plain_text

PARSERS: dict[SourceKind, Callable[[str], ParseResult]] = {
    SourceKind.CSV: parse_csv,
    SourceKind.JSON: parse_json,
    SourceKind.PLAIN_TEXT: parse_plain_text,
    SourceKind.CHAT_TEXT: parse_chat_text,
}


def resolve_source_kind(source_kind: str) -> SourceKind:
    """Validate a declared source kind.

    Raises:
        UnsupportedFormatError: If the kind is not one of the known kinds.
    """
    try:
        return SourceKind(source_kind)
    except ValueError as e:
        raise UnsupportedFormatError(
            f"Unsupported source kind '{source_kind}'; "
            f"expected one of {[kind.value for kind in SourceKind]}"
        ) from e


def detect_source_kind(filename: str | Path) -> SourceKind:
    """Infer the source kind of an uploaded file from its suffix.

    Raises:
        UnsupportedFormatError: If the suffix is not recognized.
    """
    suffix = Path(filename).suffix.lower()
    kind = SUFFIX_SOURCE_KINDS.get(suffix)
    if kind is None:
        raise UnsupportedFormatError(
            f"Cannot infer input kind from '{filename}'; "
            f"supported suffixes are {sorted(SUFFIX_SOURCE_KINDS)}"
        )
    return kind


def parse_transcript(raw: bytes | str, source_kind: str) -> ParseResult:
    """Parse raw transcript input of a declared kind into utterances.

    Args:
        raw: Raw file bytes or pasted text.
        source_kind: One of csv, json, plain-text, chat-text.

    Returns:
        ParseResult: Parsed utterances and the truncation flag.

    Raises:
        UnsupportedFormatError: If the kind is unknown (before any parsing).
        MissingColumnError: If a CSV has no text column.
        MalformedInputError: If a JSON payload does not parse.
    """
    kind = resolve_source_kind(source_kind)
    text = decode_input(raw)
    logger.debug(LogMessage.PARSING.format(kind, len(text)))
    return PARSERS[kind](text)


__all__ = [
    "ChatLine",
    "ChatLineKind",
    "detect_source_kind",
    "match_chat_line",
    "parse_chat_text",
    "parse_csv",
    "parse_json",
    "parse_plain_text",
    "parse_transcript",
    "resolve_source_kind",
]
