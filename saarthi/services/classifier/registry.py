"""
Classifier Registry - builds the classifier from settings.

Selects the HTTP labeler when a labeling endpoint is configured and the
no-op labeler otherwise.
"""

import logging
from typing import Optional

from saarthi.core.settings import settings
from saarthi.services.classifier.base import ImageLabeler
from saarthi.services.classifier.classifier import ComplaintClassifier
from saarthi.services.classifier.http_labeler import HttpImageLabeler
from saarthi.services.classifier.noop_labeler import NoOpImageLabeler

logger = logging.getLogger(__name__)


def build_image_labeler() -> ImageLabeler:
    if not settings.CLASSIFIER_ENABLED:
        logger.info("⚠️ Image classification disabled globally (CLASSIFIER_ENABLED=false)")
        return NoOpImageLabeler()

    labeler = HttpImageLabeler(
        base_url=settings.IMAGE_LABELER_URL,
        api_key=settings.IMAGE_LABELER_API_KEY,
        timeout_seconds=settings.CLASSIFIER_TIMEOUT_SECONDS,
    )
    if labeler.is_enabled():
        return labeler
    return NoOpImageLabeler()


def build_classifier(labeler: Optional[ImageLabeler] = None) -> ComplaintClassifier:
    return ComplaintClassifier(
        labeler=labeler or build_image_labeler(),
        confidence_threshold=settings.LABEL_CONFIDENCE_THRESHOLD,
        timeout_seconds=settings.CLASSIFIER_TIMEOUT_SECONDS,
        init_attempts=settings.CLASSIFIER_INIT_ATTEMPTS,
        init_retry_delay_seconds=settings.CLASSIFIER_INIT_RETRY_DELAY_SECONDS,
    )


# Global classifier instance (singleton)
_classifier: Optional[ComplaintClassifier] = None


def get_classifier() -> ComplaintClassifier:
    """Get or create the ComplaintClassifier singleton."""
    global _classifier
    if _classifier is None:
        _classifier = build_classifier()
    return _classifier
