"""
Submission service - turns a citizen complaint into a routed report.

Flow:
1. Classify (image labels if an image is attached, else text keywords)
2. Create the report pre-classified as in-progress with department and deadline
3. Award karma to the reporter

Classification finishes before any store mutation, so abandoning a pending
submission leaves nothing half-written.
"""

import asyncio
import logging
from typing import Optional, Tuple

from saarthi.models.report import Report, ReportCreate, ReportStatus, ReportSubmission, SubmissionResult
from saarthi.services.classifier.classifier import ComplaintClassifier
from saarthi.services.karma import KarmaCounter
from saarthi.services.report_store import ReportStore
from saarthi.utils.geo import Coordinates, bearing_direction

logger = logging.getLogger(__name__)

IMAGE_COMPLAINT_TITLE = "Image complaint"


class SubmissionService:
    def __init__(
        self,
        classifier: ComplaintClassifier,
        store: ReportStore,
        karma: KarmaCounter,
        karma_points: int = 10,
        default_location: Tuple[float, float] = (28.4744, 77.5040),
    ):
        self.classifier = classifier
        self.store = store
        self.karma = karma
        self.karma_points = karma_points
        self.default_location = default_location

    def _record(self, create: ReportCreate) -> Report:
        # Runs in a worker thread; a cancelled caller still gets both writes or neither
        report = self.store.create(create)
        self.karma.add(self.karma_points)
        return report

    @staticmethod
    def _observer(submission: ReportSubmission) -> Optional[Coordinates]:
        if submission.observer_lat is None or submission.observer_lng is None:
            return None
        return (submission.observer_lat, submission.observer_lng)

    async def submit(self, submission: ReportSubmission) -> SubmissionResult:
        """
        Classify and store a complaint.

        Raises:
            ValueError: If the submission has neither text nor an image
        """
        title = (submission.title or "").strip()
        text = " ".join(t for t in (title, (submission.description or "").strip()) if t)
        if not text and not submission.image_ref:
            raise ValueError("Please enter a complaint or upload an image")

        classification = await self.classifier.classify_submission(text or None, submission.image_ref)
        logger.info(
            f"Submission classified as {classification.category} "
            f"(confidence {classification.confidence:.2f}) -> {classification.department}"
        )

        if submission.lat is not None and submission.lng is not None:
            location = (submission.lat, submission.lng)
        else:
            location = self.default_location

        observer = self._observer(submission)
        direction = bearing_direction(observer, location) if observer else None

        report = await asyncio.to_thread(
            self._record,
            ReportCreate(
                title=title or IMAGE_COMPLAINT_TITLE,
                description=submission.description or classification.description,
                lat=location[0],
                lng=location[1],
                direction=direction,
                address=submission.address,
                tags=[classification.category.lower()],
                department=classification.department,
                department_details=classification.department_details,
                deadline_days=classification.deadline,
                status=ReportStatus.IN_PROGRESS,
            ),
        )

        return SubmissionResult(report=report, classification=classification)
