"""Matching components for the question-answer engine."""

from .features import FEATURE_NAMES, FeatureExtractor, TextProfile
from .normalizer import TextNormalizer
from .ranker import RelevanceRanker
from .responder import FallbackResponder
from .sentiment import SentimentScorer
from .similarity import SimilarityEngine
from .stemmer import Stemmer
from .tagger import TagAggregator

__all__ = [
    "FEATURE_NAMES",
    "FallbackResponder",
    "FeatureExtractor",
    "RelevanceRanker",
    "SentimentScorer",
    "SimilarityEngine",
    "Stemmer",
    "TagAggregator",
    "TextNormalizer",
    "TextProfile",
]
