"""
Complaint classification.

Routes a submission to a category, department, priority tier and deadline.
Image labeling is an optional collaborator; text keywords are the fallback.
"""

from saarthi.services.classifier.base import ImageLabeler
from saarthi.services.classifier.classifier import ComplaintClassifier
from saarthi.services.classifier.http_labeler import HttpImageLabeler
from saarthi.services.classifier.noop_labeler import NoOpImageLabeler
from saarthi.services.classifier.registry import build_classifier, get_classifier

__all__ = [
    "ImageLabeler",
    "ComplaintClassifier",
    "HttpImageLabeler",
    "NoOpImageLabeler",
    "build_classifier",
    "get_classifier",
]
