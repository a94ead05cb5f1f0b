"""SnipStack content classification — pattern stages, remote classifier, fallback rules."""

from snipstack.classify.classifier import ContentClassifier
from snipstack.classify.models import Classification
from snipstack.classify.remote import RemoteClassifier

__all__ = ["Classification", "ContentClassifier", "RemoteClassifier"]
