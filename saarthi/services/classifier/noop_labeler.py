"""
No-op Image Labeler - used when no labeling service is configured.
Never loads, so the classifier always takes the fallback path.
"""

from typing import Dict, List

from saarthi.models.classification import LabelPrediction
from saarthi.services.classifier.base import ImageLabeler


class NoOpImageLabeler(ImageLabeler):
    MODEL_NAME = "none"
    MODEL_VERSION = "0"

    def is_enabled(self) -> bool:
        return False

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION}

    def load(self) -> None:
        raise RuntimeError("No image labeler configured")

    def label_image(self, image_ref: str) -> List[LabelPrediction]:
        return []
