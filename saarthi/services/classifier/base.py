"""
Image Labeler Base Interface.

The engine does not run image inference itself. An image-labeling
collaborator turns an uploaded image reference into ranked labels; every
implementation must follow this contract.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from saarthi.models.classification import LabelPrediction


class ImageLabeler(ABC):
    """
    Abstract base class for image-labeling collaborators.

    `load()` and `label_image()` may block and may raise; the classifier
    runs them off the event loop under a timeout and converts every failure
    into the GENERAL fallback.
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """True if this labeler is configured and can be tried."""
        pass

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """Dict with 'name' and 'version' keys."""
        pass

    @abstractmethod
    def load(self) -> None:
        """
        Prepare the model (download weights, warm up a remote endpoint...).

        Raises:
            Exception: if the model is not available
        """
        pass

    @abstractmethod
    def label_image(self, image_ref: str) -> List[LabelPrediction]:
        """
        Label an image.

        Args:
            image_ref: Reference to an uploaded image (URL or storage path)

        Returns:
            Predictions ordered by descending confidence (may be empty)
        """
        pass
