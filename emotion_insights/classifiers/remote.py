"""Zero-shot classifier calling the Hugging Face Inference API."""

from collections.abc import Sequence
from typing import Any

import httpx
from aiolimiter import AsyncLimiter

from ..constants import (
    DEFAULT_REMOTE_RATE_LIMIT,
    DEFAULT_REMOTE_TIMEOUT_SECONDS,
    HF_INFERENCE_BASE_URL,
)
from ..errors import ClassifierResponseError
from .base import ClassificationResult, ClassifierConfig, validate_request


class RemoteZeroShotClassifier:
    """Classifies text through a hosted zero-shot model.

    Attributes:
        config: Model and inference settings (device is ignored).
        base_url: Inference API base URL; the model name is appended.
        rate_limiter: AsyncLimiter capping requests per second.
    """

    def __init__(
        self,
        *,
        api_token: str | None,
        config: ClassifierConfig | None = None,
        base_url: str = HF_INFERENCE_BASE_URL,
        timeout: float = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        max_rate: int = DEFAULT_REMOTE_RATE_LIMIT,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the remote classifier.

        Args:
            api_token: Hugging Face API token, sent as a bearer token if set.
            config: Classifier settings (defaults to ClassifierConfig()).
            base_url: Inference API base URL.
            timeout: Request timeout in seconds.
            max_rate: Maximum requests per second.
            http_client: Optional preconfigured client (used in tests).
        """
        self.config = config or ClassifierConfig()
        self.base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0)
        )
        self.rate_limiter = AsyncLimiter(max_rate=max_rate, time_period=1)

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.config.model}"

    def _build_payload(
        self, *, text: str, candidate_labels: Sequence[str]
    ) -> dict[str, Any]:
        return {
            "inputs": text,
            "parameters": {
                "candidate_labels": list(candidate_labels),
                "multi_label": self.config.multi_label,
                "hypothesis_template": self.config.hypothesis_template,
            },
        }

    async def classify(
        self, text: str, candidate_labels: Sequence[str]
    ) -> ClassificationResult:
        """Rank candidate labels for the text via the Inference API.

        Raises:
            httpx.HTTPError: On transport failures or non-2xx responses.
            ClassifierResponseError: If the body is not a valid result.
        """
        validate_request(text, candidate_labels)
        payload = self._build_payload(text=text, candidate_labels=candidate_labels)

        async with self.rate_limiter:
            response = await self._client.post(
                self.url, json=payload, headers=self._headers
            )
            response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise ClassifierResponseError(f"Non-JSON classifier response: {e}") from e

        return ClassificationResult.from_raw(data)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RemoteZeroShotClassifier":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
