"""HTTP client for the remote inference service."""

from typing import Any

import requests

from core.entities import RawImage
from logging_config import get_logger

logger = get_logger(__name__)


class InferenceServiceError(RuntimeError):
    """Raised when the inference service is unreachable or answers with an error."""


class InferenceClient:
    """
    Thin wrapper over the three inference-service endpoints.

    No retries: every call either returns the decoded body or raises
    InferenceServiceError.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "VisionBox/1.0"})

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise InferenceServiceError(f"{method} {path} failed: {e}") from e
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise InferenceServiceError(f"Invalid JSON from {resp.url}") from e

    def fetch_models(self) -> dict[str, Any]:
        """GET /models -> {"models": [...], "current_model": id}."""
        data = self._json(self._request("GET", "/models"))
        if not isinstance(data, dict):
            raise InferenceServiceError("Unexpected /models payload")
        return data

    def predict(self, image: RawImage) -> dict[str, Any]:
        """POST /predict with a single-file multipart body."""
        files = {"file": (image.filename, image.content, image.content_type)}
        data = self._json(self._request("POST", "/predict", files=files))
        if not isinstance(data, dict):
            raise InferenceServiceError("Unexpected /predict payload")
        return data

    def set_model(self, model_id: str) -> None:
        """POST /set-model?model_name=<id>; the response body is ignored."""
        self._request("POST", "/set-model", params={"model_name": model_id})
        logger.debug(f"Inference service acknowledged model {model_id}")
