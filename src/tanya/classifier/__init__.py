"""Tag classifier: augmentation, network, training and persistence."""

from tanya.classifier.augment import AugmentationGenerator
from tanya.classifier.model import ClassifierModel, TagClassifier
from tanya.classifier.network import FeedForwardNetwork
from tanya.classifier.store import ModelStore

__all__ = [
    "AugmentationGenerator",
    "ClassifierModel",
    "FeedForwardNetwork",
    "ModelStore",
    "TagClassifier",
]
