"""In-process zero-shot classifier backed by a Hugging Face transformers pipeline."""

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from ..constants import CPU_DEVICE, ZERO_SHOT_TASK, LogMessage
from ..errors import ClassifierInitError
from .base import ClassificationResult, ClassifierConfig, validate_request

PipelineFactory = Callable[..., Any]


def transformers_pipeline(task: str, *, model: str, device: str) -> Any:
    """Build a transformers pipeline; transformers is only needed for this backend."""
    from transformers import pipeline

    return pipeline(task, model=model, device=device)


class LocalZeroShotClassifier:
    """Zero-shot classifier that owns a lazily loaded transformers pipeline.

    The pipeline is loaded on first use (or explicitly via ``load``). If the
    configured device fails, loading is retried once on CPU. A load failure
    is remembered, so later calls fail fast instead of reloading the model.

    Attributes:
        config: Model, device and inference settings.
    """

    def __init__(
        self,
        *,
        config: ClassifierConfig | None = None,
        pipeline_factory: PipelineFactory = transformers_pipeline,
    ):
        """Initialize the classifier without loading the model.

        Args:
            config: Classifier settings (defaults to ClassifierConfig()).
            pipeline_factory: Callable building a pipeline from
                (task, model=..., device=...).
        """
        self.config = config or ClassifierConfig()
        self._pipeline_factory = pipeline_factory
        self._pipeline: Any | None = None
        self._init_error: ClassifierInitError | None = None
        self._lock = asyncio.Lock()
        self.device: str | None = None

    @property
    def is_ready(self) -> bool:
        return self._pipeline is not None

    def _build(self, device: str) -> Any:
        logger.info(LogMessage.LOADING_MODEL.format(self.config.model, device))
        return self._pipeline_factory(
            ZERO_SHOT_TASK, model=self.config.model, device=device
        )

    def _load_with_fallback(self) -> Any:
        device = self.config.device
        try:
            pipe = self._build(device)
        except Exception as e:
            logger.error(LogMessage.MODEL_LOAD_FAILED.format(device, e))
            if device == CPU_DEVICE:
                raise ClassifierInitError(
                    f"Failed to initialize classifier on {device}: {e}"
                ) from e

            logger.info(LogMessage.RETRYING_ON_CPU)
            device = CPU_DEVICE
            try:
                pipe = self._build(device)
            except Exception as cpu_error:
                logger.error(LogMessage.MODEL_LOAD_FAILED.format(device, cpu_error))
                raise ClassifierInitError(
                    f"Failed to initialize classifier: {cpu_error}"
                ) from cpu_error

        self.device = device
        logger.success(LogMessage.MODEL_LOADED.format(device))
        return pipe

    async def load(self) -> Any:
        """Load the pipeline once; concurrent callers share a single load.

        Returns:
            The loaded pipeline.

        Raises:
            ClassifierInitError: If the model cannot be loaded on any device.
        """
        if self._pipeline is not None:
            return self._pipeline

        async with self._lock:
            if self._init_error is not None:
                raise self._init_error
            if self._pipeline is None:
                try:
                    self._pipeline = await asyncio.to_thread(self._load_with_fallback)
                except ClassifierInitError as e:
                    self._init_error = e
                    raise
        return self._pipeline

    async def close(self) -> None:
        """Release the pipeline so the next call reloads it."""
        self._pipeline = None
        self._init_error = None
        self.device = None
        logger.debug(LogMessage.MODEL_RELEASED)

    async def __aenter__(self) -> "LocalZeroShotClassifier":
        # The pipeline loads on the first classify call.
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def classify(
        self, text: str, candidate_labels: Sequence[str]
    ) -> ClassificationResult:
        """Rank candidate labels for the text.

        Args:
            text: Text to classify.
            candidate_labels: Labels to rank.

        Returns:
            ClassificationResult: Validated ranked labels.
        """
        validate_request(text, candidate_labels)
        pipe = await self.load()
        raw = await asyncio.to_thread(
            pipe,
            text,
            list(candidate_labels),
            multi_label=self.config.multi_label,
            hypothesis_template=self.config.hypothesis_template,
        )
        return ClassificationResult.from_raw(raw)
