"""Zero-shot classifier contract and result validation."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Protocol

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..constants import DEFAULT_DEVICE, DEFAULT_HYPOTHESIS_TEMPLATE, DEFAULT_MODEL
from ..errors import ClassifierResponseError
from ..models import LabelScore


@dataclass(frozen=True)
class ClassifierConfig:
    """Settings shared by the classifier backends."""

    model: str = DEFAULT_MODEL
    device: str = DEFAULT_DEVICE
    multi_label: bool = False
    hypothesis_template: str = DEFAULT_HYPOTHESIS_TEMPLATE


class ClassificationResult(BaseModel):
    """Ranked labels returned by a zero-shot classifier, most likely first."""

    labels: list[str] = Field(min_length=1, description="Labels, most likely first")
    scores: list[Annotated[float, Field(ge=0.0, le=1.0)]] = Field(
        description="Scores aligned with labels"
    )

    @model_validator(mode="after")
    def _labels_match_scores(self) -> "ClassificationResult":
        if len(self.labels) != len(self.scores):
            raise ValueError(
                f"{len(self.labels)} labels but {len(self.scores)} scores"
            )
        return self

    @classmethod
    def from_raw(cls, raw: Any) -> "ClassificationResult":
        """Validate a raw classifier response into the labels/scores contract.

        A one-element list wrapping the result is unwrapped first.

        Args:
            raw: Whatever the classifier returned.

        Returns:
            ClassificationResult: The validated result.

        Raises:
            ClassifierResponseError: If the response has any other shape.
        """
        if isinstance(raw, list) and raw:
            raw = raw[0]
        if not isinstance(raw, Mapping):
            raise ClassifierResponseError(
                f"Expected a labels/scores mapping, got {type(raw).__name__}"
            )
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            raise ClassifierResponseError(f"Invalid classifier response: {e}") from e

    def top(self) -> LabelScore:
        """Return the most likely label."""
        return LabelScore(label=self.labels[0], score=self.scores[0])

    def top_n(self, n: int) -> list[LabelScore]:
        """Return the n most likely labels in ranked order."""
        return [
            LabelScore(label=label, score=score)
            for label, score in zip(self.labels[:n], self.scores[:n])
        ]


class ZeroShotClassifier(Protocol):
    """Anything that can rank caller-supplied labels for a text."""

    async def classify(
        self, text: str, candidate_labels: Sequence[str]
    ) -> ClassificationResult: ...


def validate_request(text: str, candidate_labels: Sequence[str]) -> None:
    """Reject requests the classifier cannot answer.

    Raises:
        ValueError: If the text is blank or no candidate labels are given.
    """
    if not text or not text.strip():
        raise ValueError("Input text cannot be empty")
    if not candidate_labels:
        raise ValueError("Candidate labels cannot be empty")
