"""
HTTP Image Labeler - calls an external image-labeling service.

Expected service contract:
- GET  {IMAGE_LABELER_URL}/health  -> 200 when the model is loaded
- POST {IMAGE_LABELER_URL}/label   {"image_ref": "..."} ->
       {"predictions": [{"label": "pothole", "confidence": 0.83}, ...]}

MobileNet-style items ({"className": ..., "probability": ...}) are accepted too.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from saarthi.models.classification import LabelPrediction
from saarthi.services.classifier.base import ImageLabeler

logger = logging.getLogger(__name__)


class HttpImageLabeler(ImageLabeler):
    """
    Image labeler backed by a remote HTTP endpoint.
    Disabled when no base URL is configured.
    """

    MODEL_NAME = "remote-image-labeler"
    MODEL_VERSION = "1.0"

    def __init__(self, base_url: Optional[str], api_key: Optional[str] = None, timeout_seconds: float = 10.0):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.enabled = bool(self.base_url)

        if self.enabled:
            logger.info(f"✅ HTTP image labeler configured: {self.base_url}")
        else:
            logger.info("⚠️ HTTP image labeler disabled: IMAGE_LABELER_URL not set")

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION}

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def load(self) -> None:
        if not self.enabled:
            raise RuntimeError("Image labeler URL not configured")
        resp = requests.get(f"{self.base_url}/health", headers=self._headers(), timeout=self.timeout_seconds)
        if resp.status_code != 200:
            raise RuntimeError(f"Image labeler health check returned {resp.status_code}")

    def label_image(self, image_ref: str) -> List[LabelPrediction]:
        resp = requests.post(
            f"{self.base_url}/label",
            json={"image_ref": image_ref},
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )
        resp.raise_for_status()
        return self._parse_predictions(resp.json())

    @staticmethod
    def _parse_predictions(data: Any) -> List[LabelPrediction]:
        items = data.get("predictions", []) if isinstance(data, dict) else data
        predictions = []
        for item in items or []:
            label = item.get("label") or item.get("className")
            if not label:
                continue
            confidence = item.get("confidence", item.get("probability", 0.0)) or 0.0
            predictions.append(LabelPrediction(label=str(label), confidence=max(0.0, min(1.0, float(confidence)))))
        return predictions
