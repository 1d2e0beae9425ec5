"""
Source package initialization for Business Card Fusion API.
"""

from .contact import ContactCandidate, ExtractionOutcome, ScoredLine
from .vocabulary import Vocabulary, DEFAULT_VOCABULARY, MOBILE_PREFIXES
from .extractors import FieldExtractor
from .classifier import LineClassifier
from .parser import ContactParser
from .vcard import VCardParser, VCardProperty, PayloadKind, classify_payload, parse_vcard, parse_url
from .assistant import parse_assistant_response
from .fusion import merge, ContactForm, CardFusionError, EmptyContactError
from .pipeline import CardFusionPipeline, FusionResult

__all__ = [
    "ContactCandidate",
    "ExtractionOutcome",
    "ScoredLine",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    "MOBILE_PREFIXES",
    "FieldExtractor",
    "LineClassifier",
    "ContactParser",
    "VCardParser",
    "VCardProperty",
    "PayloadKind",
    "classify_payload",
    "parse_vcard",
    "parse_url",
    "parse_assistant_response",
    "merge",
    "ContactForm",
    "CardFusionError",
    "EmptyContactError",
    "CardFusionPipeline",
    "FusionResult",
]
