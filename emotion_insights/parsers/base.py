"""Shared helpers for transcript parsers."""

from loguru import logger

from ..constants import MAX_UTTERANCES, MIN_TEXT_LENGTH, LogMessage
from ..models import ParseResult, Utterance


def decode_input(raw: bytes | str) -> str:
    """Decode raw input into text.

    A UTF-8 byte order mark is dropped; undecodable bytes are replaced
    rather than failing the run.

    Args:
        raw: Raw file bytes or pasted text.

    Returns:
        str: Decoded text.
    """
    if isinstance(raw, bytes):
        return raw.decode("utf-8-sig", errors="replace")
    return raw.removeprefix("\ufeff")


def is_usable_text(text: str | None) -> bool:
    """Return True if the trimmed text is long enough to classify."""
    return text is not None and len(text.strip()) >= MIN_TEXT_LENGTH


def optional_text(value: object) -> str | None:
    """Convert an optional field value to a trimmed string, or None if blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_result(
    *,
    utterances: list[Utterance],
    skipped: int,
    truncated: bool,
    source_kind: str,
) -> ParseResult:
    """Log the outcome of a parse and wrap it in a ParseResult.

    Args:
        utterances: Utterances kept by the parser.
        skipped: Number of items dropped for being too short or empty.
        truncated: Whether items beyond the cap were discarded.
        source_kind: Kind of input that was parsed, for logging.

    Returns:
        ParseResult: Immutable parse result.
    """
    if skipped:
        logger.debug(LogMessage.SKIPPED_SHORT.format(skipped, MIN_TEXT_LENGTH))
    if truncated:
        logger.warning(LogMessage.TRUNCATED.format(MAX_UTTERANCES, MAX_UTTERANCES))
    logger.info(LogMessage.PARSED.format(len(utterances), source_kind))

    return ParseResult(utterances=tuple(utterances), truncated=truncated)
