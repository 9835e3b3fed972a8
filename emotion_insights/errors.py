"""Exceptions raised by the analysis pipeline."""


class EmotionInsightsError(Exception):
    """Base exception for transcript analysis errors."""

    pass


class UnsupportedFormatError(EmotionInsightsError):
    """The declared source kind or file type is not recognized."""

    pass


class TranscriptParseError(EmotionInsightsError):
    """Raw input could not be turned into utterances."""

    pass


class MissingColumnError(TranscriptParseError):
    """CSV header has no recognizable text column."""

    pass


class MalformedInputError(TranscriptParseError):
    """JSON payload failed to parse."""

    pass


class ClassifierError(EmotionInsightsError):
    """Base exception for zero-shot classifier failures."""

    pass


class ClassifierInitError(ClassifierError):
    """The classifier pipeline could not be loaded on any device."""

    pass


class ClassifierResponseError(ClassifierError):
    """The classifier returned a result that violates the labels/scores contract."""

    pass


__all__ = [
    "ClassifierError",
    "ClassifierInitError",
    "ClassifierResponseError",
    "EmotionInsightsError",
    "MalformedInputError",
    "MissingColumnError",
    "TranscriptParseError",
    "UnsupportedFormatError",
]
