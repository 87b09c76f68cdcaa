"""
Complaint Classifier - routes a submission to a category and department.

Two strategies:
- Label-based: scores each category by the share of its keywords found in
  the labels returned by the image-labeling collaborator.
- Keyword-based: first category whose keyword occurs in the free text.

The image path is best-effort. Timeouts, errors, an empty label list or a
model that never loaded all resolve to the deterministic fallback; the
classifier never raises into the submission flow.
"""

import asyncio
import logging
import math
from typing import List, Optional, Sequence

from saarthi.models.classification import ClassificationResult, LabelPrediction
from saarthi.models.result import ErrorKind, Result
from saarthi.services.classifier.base import ImageLabeler
from saarthi.services.classifier.categories import CATEGORIES, GENERAL, Category
from saarthi.services.classifier.noop_labeler import NoOpImageLabeler

logger = logging.getLogger(__name__)

IMAGE_UNAVAILABLE_DESCRIPTION = "Image analysis unavailable; please add description for better routing"


def _percent(confidence: float) -> int:
    return int(math.floor(confidence * 100 + 0.5))


class ComplaintClassifier:
    """
    Classifier with an injected image labeler.

    The labeler is loaded lazily (at most `init_attempts` tries). If loading
    fails the image path is disabled for the rest of the session.
    """

    LABEL_FALLBACK_CONFIDENCE = 0.15
    TEXT_MATCH_CONFIDENCE = 0.75
    TEXT_FALLBACK_CONFIDENCE = 0.2

    def __init__(
        self,
        labeler: Optional[ImageLabeler] = None,
        confidence_threshold: float = 0.6,
        timeout_seconds: float = 10.0,
        init_attempts: int = 2,
        init_retry_delay_seconds: float = 0.5,
        categories: Optional[Sequence[Category]] = None,
    ):
        self.labeler = labeler or NoOpImageLabeler()
        self.confidence_threshold = confidence_threshold
        self.timeout_seconds = timeout_seconds
        self.init_attempts = max(1, init_attempts)
        self.init_retry_delay_seconds = init_retry_delay_seconds
        self.categories = list(categories) if categories is not None else CATEGORIES
        self.model_ready = False
        self.image_path_disabled = False

    # ------------------------------------------------------------------
    # Result builders
    # ------------------------------------------------------------------

    def _result(
        self,
        category: Category,
        confidence: float,
        description: Optional[str] = None,
        detected_objects: Optional[List[str]] = None,
    ) -> ClassificationResult:
        return ClassificationResult(
            category=category.name,
            department=category.department,
            department_details=category.department_details.model_copy(),
            deadline=category.deadline,
            priority=category.priority,
            description=description or category.description,
            confidence=confidence,
            detected_objects=detected_objects or [],
        )

    def fallback(self) -> ClassificationResult:
        """GENERAL result used whenever the image path cannot help."""
        return self._result(GENERAL, self.LABEL_FALLBACK_CONFIDENCE, description=IMAGE_UNAVAILABLE_DESCRIPTION)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def classify_labels(self, predictions: Sequence[LabelPrediction]) -> ClassificationResult:
        """
        Label-based classification.

        Args:
            predictions: Labels from the image-labeling collaborator

        Returns:
            Best category scoring >= threshold, else GENERAL at 0.15
        """
        if not predictions:
            return self.fallback()

        detected = [p.label.lower() for p in predictions]
        shown = [f"{p.label} ({_percent(p.confidence)}%)" for p in predictions[:3]]

        best: Optional[Category] = None
        best_score = 0.0
        for category in self.categories:
            if not category.keywords:
                continue
            match_count = sum(1 for kw in category.keywords if any(kw in obj for obj in detected))
            score = match_count / len(category.keywords)
            # strict '>' keeps the earlier category on ties
            if score > best_score and score >= self.confidence_threshold:
                best, best_score = category, score

        if best is None:
            logger.info(f"No category cleared threshold {self.confidence_threshold} for labels {detected[:3]}")
            return self._result(
                GENERAL,
                self.LABEL_FALLBACK_CONFIDENCE,
                description=f"{GENERAL.description}. Detected: {', '.join(shown)}",
                detected_objects=shown,
            )

        return self._result(
            best,
            best_score,
            description=f"{best.description}. Detected: {', '.join(shown)}",
            detected_objects=shown,
        )

    def classify_text(self, text: Optional[str]) -> ClassificationResult:
        """
        Keyword-based classification of free text.
        First category (in table order) with a keyword substring wins.
        """
        txt = (text or "").lower()
        for category in self.categories:
            for kw in category.keywords:
                if kw in txt:
                    return self._result(category, self.TEXT_MATCH_CONFIDENCE, detected_objects=[kw])
        return self._result(GENERAL, self.TEXT_FALLBACK_CONFIDENCE)

    # ------------------------------------------------------------------
    # Image path
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """
        Load the labeling model, retrying once after a short delay.

        Returns:
            True if the image path is usable
        """
        if self.model_ready:
            return True
        if self.image_path_disabled:
            return False
        if not self.labeler.is_enabled():
            logger.info("Image labeler not enabled, image classification disabled for this session")
            self.image_path_disabled = True
            return False

        name = self.labeler.get_model_info().get("name", "unknown")
        for attempt in range(1, self.init_attempts + 1):
            try:
                await asyncio.wait_for(asyncio.to_thread(self.labeler.load), timeout=self.timeout_seconds)
                self.model_ready = True
                logger.info(f"✅ Image model '{name}' loaded")
                return True
            except Exception as e:
                logger.warning(f"Image model load attempt {attempt} failed: {e!r}")
                if attempt < self.init_attempts:
                    await asyncio.sleep(self.init_retry_delay_seconds)

        logger.error(f"⚠️ Image model '{name}' failed to load after {self.init_attempts} attempts; image path disabled")
        self.image_path_disabled = True
        return False

    async def label(self, image_ref: str) -> Result[List[LabelPrediction]]:
        """Run the labeler under the timeout; every failure is a CLASSIFICATION_UNAVAILABLE result."""
        if not await self.initialize():
            return Result.failure(ErrorKind.CLASSIFICATION_UNAVAILABLE, "image model not available")
        try:
            predictions = await asyncio.wait_for(
                asyncio.to_thread(self.labeler.label_image, image_ref),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return Result.failure(
                ErrorKind.CLASSIFICATION_UNAVAILABLE,
                f"image labeling timed out after {self.timeout_seconds}s",
            )
        except Exception as e:
            return Result.failure(ErrorKind.CLASSIFICATION_UNAVAILABLE, f"image labeling failed: {e!r}")

        if not predictions:
            return Result.failure(ErrorKind.CLASSIFICATION_UNAVAILABLE, "no predictions")
        return Result.success(list(predictions))

    async def classify_image(self, image_ref: str, text: Optional[str] = None) -> ClassificationResult:
        """
        Label-based classification of an uploaded image.
        On any failure defers to the keyword path if `text` is present.
        """
        labels = await self.label(image_ref)
        if labels.ok:
            return self.classify_labels(labels.value)

        logger.warning(f"⚠️ Image classification unavailable ({labels.message}), using fallback")
        if text and text.strip():
            return self.classify_text(text)
        return self.fallback()

    async def classify_submission(self, text: Optional[str], image_ref: Optional[str] = None) -> ClassificationResult:
        """Pick the strategy from what the submission carries."""
        if image_ref:
            return await self.classify_image(image_ref, text)
        return self.classify_text(text)
