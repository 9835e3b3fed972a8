"""Constants and enumerations for transcript emotion analysis."""

from enum import StrEnum
from typing import Final


# Classifier Configuration
DEFAULT_MODEL: Final[str] = "MoritzLaurer/mDeBERTa-v3-base-mnli-xnli"
DEFAULT_DEVICE: Final[str] = "cuda"
CPU_DEVICE: Final[str] = "cpu"
DEFAULT_HYPOTHESIS_TEMPLATE: Final[str] = "This example is {}."
ZERO_SHOT_TASK: Final[str] = "zero-shot-classification"
HF_INFERENCE_BASE_URL: Final[str] = "https://api-inference.huggingface.co/models"
DEFAULT_REMOTE_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_REMOTE_RATE_LIMIT: Final[int] = 8

# Parsing Limits
MAX_UTTERANCES: Final[int] = 100
MIN_TEXT_LENGTH: Final[int] = 3
MAX_SPEAKER_LENGTH: Final[int] = 50

# Aggregation Limits
MAX_TOPICS_PER_UTTERANCE: Final[int] = 3
MAX_HIGH_RISK_SEGMENTS: Final[int] = 5
TIMELINE_BUCKETS: Final[int] = 10
NEGATIVE_RATIO_THRESHOLD: Final[float] = 0.3
ANGER_RATIO_THRESHOLD: Final[float] = 0.2
HIGH_URGENCY_RATIO_THRESHOLD: Final[float] = 0.1

# Fallback
FALLBACK_SCORE: Final[float] = 0.5

# JSON Serialization
JSON_INDENT: Final[int] = 2

# Numeric Constants
EXIT_CODE_ERROR: Final[int] = 1
MS_PER_SECOND: Final[int] = 1000


class SourceKind(StrEnum):
    """Declared kind of raw transcript input."""

    CSV = "csv"
    JSON = "json"
    PLAIN_TEXT = "plain-text"
    CHAT_TEXT = "chat-text"


class ClassifierBackend(StrEnum):
    """Available zero-shot classifier backends."""

    LOCAL = "local"
    REMOTE = "remote"


class Sentiment(StrEnum):
    """Sentiment labels."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Emotion(StrEnum):
    """Emotion labels."""

    JOY = "joy"
    ANGER = "anger"
    FEAR = "fear"
    SADNESS = "sadness"
    SURPRISE = "surprise"
    NEUTRAL = "neutral"


class Urgency(StrEnum):
    """Urgency labels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Topic(StrEnum):
    """Candidate topic labels."""

    CUSTOMER_SERVICE = "customer service"
    TECHNICAL_SUPPORT = "technical support"
    BILLING = "billing"
    PRODUCT_FEEDBACK = "product feedback"
    COMPLAINT = "complaint"
    COMPLIMENT = "compliment"
    QUESTION = "question"
    REQUEST = "request"


GENERAL_TOPIC: Final[str] = "general"

SENTIMENT_LABELS: Final[tuple[str, ...]] = tuple(s.value for s in Sentiment)
EMOTION_LABELS: Final[tuple[str, ...]] = tuple(e.value for e in Emotion)
URGENCY_LABELS: Final[tuple[str, ...]] = tuple(u.value for u in Urgency)
TOPIC_LABELS: Final[tuple[str, ...]] = tuple(t.value for t in Topic)


class ClassificationRole(StrEnum):
    """The four independent label sets requested per utterance."""

    SENTIMENT = "sentiment"
    EMOTION = "emotion"
    URGENCY = "urgency"
    TOPIC = "topic"


# Column synonyms for CSV headers (matched by case-insensitive substring)
TEXT_COLUMN_SYNONYMS: Final[tuple[str, ...]] = ("text", "message", "content")
TIMESTAMP_COLUMN_SYNONYMS: Final[tuple[str, ...]] = ("time", "date", "timestamp")
SPEAKER_COLUMN_SYNONYMS: Final[tuple[str, ...]] = ("speaker", "user", "agent")


class JsonField(StrEnum):
    """JSON payload field names."""

    MESSAGES = "messages"
    DATA = "data"


JSON_TEXT_FIELDS: Final[tuple[str, ...]] = ("text", "message", "content", "body")
JSON_TIMESTAMP_FIELDS: Final[tuple[str, ...]] = ("timestamp", "time", "date")
JSON_SPEAKER_FIELDS: Final[tuple[str, ...]] = ("speaker", "user", "agent", "author")

# File suffix -> source kind
SUFFIX_SOURCE_KINDS: Final[dict[str, SourceKind]] = {
    ".csv": SourceKind.CSV,
    ".json": SourceKind.JSON,
    ".txt": SourceKind.PLAIN_TEXT,
    ".text": SourceKind.PLAIN_TEXT,
    ".log": SourceKind.PLAIN_TEXT,
}


class SuggestedAction(StrEnum):
    """Remediation messages attached to high-risk segments."""

    ESCALATE = "Immediate escalation recommended: route to a senior agent or supervisor."
    ACKNOWLEDGE_FRUSTRATION = (
        "Acknowledge the customer's frustration and apologize before offering a solution."
    )
    ADDRESS_CONCERNS = "Address the customer's concerns directly with a clear resolution."
    MONITOR = "Monitor the conversation for further escalation."


class Suggestion(StrEnum):
    """Improvement suggestions emitted from conversation-wide ratios."""

    SENTIMENT_REVIEW = (
        "High negative sentiment detected. Review response templates and tone "
        "to improve customer satisfaction."
    )
    DEESCALATION_TRAINING = (
        "Frequent anger detected. Provide de-escalation training for agents."
    )
    WORKFLOW_OPTIMIZATION = (
        "Many high-urgency messages. Optimize workflows to resolve urgent issues faster."
    )
    LOOKS_GOOD = (
        "Communication quality looks good. Keep up the positive, helpful tone."
    )


class ItemLabel(StrEnum):
    """Synthetic labels used when utterances carry no timestamp."""

    ITEM = "Item {}"
    PERCENT = "{}%"


class ReportKey(StrEnum):
    """Analysis report output keys."""

    SUMMARY = "summary"
    HIGH_RISK_SEGMENTS = "high_risk_segments"
    IMPROVEMENT_SUGGESTIONS = "improvement_suggestions"
    EMOTION_TIMELINE = "emotion_timeline"
    SOURCE_KIND = "source_kind"
    PROCESSING_TIME_MS = "processing_time_ms"
    TRUNCATED = "truncated"


class UtteranceColumn(StrEnum):
    """Column names for classified utterance exports."""

    INDEX = "index"
    SPEAKER = "speaker"
    TIMESTAMP = "timestamp"
    TEXT = "text"
    SENTIMENT = "sentiment"
    SENTIMENT_SCORE = "sentiment_score"
    EMOTION = "emotion"
    EMOTION_SCORE = "emotion_score"
    URGENCY = "urgency"
    URGENCY_SCORE = "urgency_score"
    TOPICS = "topics"


class LogMessage(StrEnum):
    """Log message templates."""

    PARSING = "Parsing {} input ({} characters)..."
    PARSED = "Parsed {} utterances from {} input"
    SKIPPED_SHORT = "Skipped {} item(s) shorter than {} characters"
    TRUNCATED = "Input exceeded {} items; only the first {} were kept"
    CLASSIFYING = "Classifying {} utterances ({} label sets each)..."
    CLASSIFIED = "Classified utterance {} ({}/{})"
    CALL_TIMING = "{} classification for utterance {} took {} ms"
    FALLBACK = "{} classification failed for utterance {}: {}. Using fallback"
    AGGREGATING = "Aggregating {} classified utterances..."
    REPORT_READY = "Analysis complete: {} utterances in {} ms"
    LOADING_MODEL = "Loading zero-shot classifier {} on {}..."
    MODEL_LOADED = "Zero-shot classifier ready on {}"
    MODEL_LOAD_FAILED = "Failed to load classifier on {}: {}"
    RETRYING_ON_CPU = "Retrying classifier load on CPU..."
    MODEL_RELEASED = "Released zero-shot classifier"
    SAVED_REPORT = "Saved analysis report to {}"
    SAVED_UTTERANCES = "Saved {} classified utterances to {}"
    ERROR_OCCURRED = "Error occurred: {}"


class CliHelp(StrEnum):
    """CLI help messages."""

    APP = "Transcript emotion, sentiment, urgency and topic analysis"
    KIND = "Input kind (csv, json, plain-text, chat-text). Inferred from the file suffix if omitted."
    TEXT_KIND = "Kind of pasted text (chat-text or plain-text)."
    BACKEND = "Classifier backend: 'local' runs transformers in-process, 'remote' calls the Hugging Face Inference API."
    MODEL = "Zero-shot classification model name."
    DEVICE = "Device for the local backend (falls back to CPU once if it fails)."
    HF_TOKEN = "Hugging Face API token for the remote backend."
    OUTPUT = "Write the analysis report as JSON to this path."
    CSV_OUTPUT = "Write the classified utterances as CSV to this path."
    VERBOSE = "Enable debug logging."
