"""Zero-shot classifier backends."""

from .base import ClassificationResult, ClassifierConfig, ZeroShotClassifier
from .local import LocalZeroShotClassifier
from .remote import RemoteZeroShotClassifier

__all__ = [
    "ClassificationResult",
    "ClassifierConfig",
    "LocalZeroShotClassifier",
    "RemoteZeroShotClassifier",
    "ZeroShotClassifier",
]
