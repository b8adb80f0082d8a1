"""Client for the hosted emotion classification model."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from brightlight.core.errors import TransportError, UpstreamError

logger = logging.getLogger(__name__)

MODEL_LOADING_MARKER = "loading"


class EmotionClassifier:
    """
    Score a text against the model's emotion labels.

    While the hosted model is cold the endpoint answers with an
    `{"error": "... currently loading"}` payload; those answers are retried
    after a fixed delay instead of being treated as failures.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None,
        *,
        max_retries: int = 3,
        retry_delay: float = 20.0,
        timeout: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
        http_client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self._api_key = api_key
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._http = http_client or httpx.Client(timeout=timeout)

    def classify(self, text: str) -> Dict[str, float]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        for attempt in range(self.max_retries + 1):
            try:
                response = self._http.post(self.url, json={"inputs": text}, headers=headers)
                payload = response.json()
            except httpx.RequestError as exc:
                raise TransportError(f"Emotion endpoint unreachable: {exc}") from exc
            except ValueError as exc:
                raise UpstreamError(f"Emotion endpoint returned non-JSON (status {response.status_code})") from exc

            error = payload.get("error") if isinstance(payload, dict) else None
            if error is None:
                if response.status_code >= 400:
                    raise UpstreamError(f"Emotion endpoint returned status {response.status_code}")
                return parse_emotion_scores(payload)

            if MODEL_LOADING_MARKER not in str(error).lower():
                raise UpstreamError(str(error), error_type="emotion_model")
            if attempt < self.max_retries:
                logger.info("Emotion model is loading, retrying in %.0f seconds", self.retry_delay)
                self._sleep(self.retry_delay)

        raise UpstreamError("Emotion model did not finish loading", error_type="model_loading")

    def close(self) -> None:
        self._http.close()


def parse_emotion_scores(payload: Any) -> Dict[str, float]:
    """Accept `[[{label, score}, ...]]` as well as the flat `[{label, score}, ...]`."""
    if not isinstance(payload, list) or not payload:
        return {}
    entries = payload[0] if isinstance(payload[0], list) else payload
    scores: Dict[str, float] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        label = entry.get("label")
        score = entry.get("score")
        if isinstance(label, str) and isinstance(score, (int, float)):
            scores[label] = float(score)
    return scores
