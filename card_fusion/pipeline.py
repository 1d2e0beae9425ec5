"""
Business Card Fusion Pipeline
Runs OCR-line parsing, QR payload parsing and fusion for one card.

SOURCES (lowest to highest precedence):
1. Heuristic OCR line parsing
2. Language-model field extraction (optional, produced elsewhere)
3. QR code payload (vCard or URL)
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .assistant import parse_assistant_response
from .contact import ContactCandidate, ExtractionOutcome
from .extractors import FieldExtractor
from .fusion import merge
from .messages import outcome_message
from .parser import ContactParser
from .vcard import PayloadKind, VCardParser
from .vocabulary import DEFAULT_MOBILE_LOCALE, DEFAULT_PHONE_REGION, DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FusionResult:
    """Result of processing one card."""
    contact: ContactCandidate
    ocr_contact: ContactCandidate
    qr_contact: Optional[ContactCandidate] = None
    assistant_contact: Optional[ContactCandidate] = None
    payload_kind: Optional[PayloadKind] = None

    @property
    def outcome(self) -> ExtractionOutcome:
        return ExtractionOutcome.of(self.contact)

    @property
    def qr_url(self) -> Optional[str]:
        """URL from the QR code, kept even when the QR carried no contact data."""
        if self.payload_kind is PayloadKind.URL and self.qr_contact:
            return self.qr_contact.website_or_url
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.outcome is not ExtractionOutcome.EMPTY,
            "outcome": self.outcome.value,
            "message": outcome_message(self.outcome),
            "has_data": self.contact.has_data,
            "contact_data": self.contact.to_dict(),
            "sources": {
                "ocr": self.ocr_contact.to_dict(),
                "qr": self.qr_contact.to_dict() if self.qr_contact else None,
                "assistant": self.assistant_contact.to_dict() if self.assistant_contact else None,
            },
            "qr_detected": self.payload_kind is not None,
            "qr_kind": self.payload_kind.value if self.payload_kind else None,
            "qr_url": self.qr_url,
        }


class CardFusionPipeline:
    """Complete extraction pipeline for one or many business cards.

    No I/O happens here: OCR lines and QR payloads come from the caller.
    """

    def __init__(
        self,
        parser: Optional[ContactParser] = None,
        vcard_parser: Optional[VCardParser] = None,
        phone_region: str = DEFAULT_PHONE_REGION,
        mobile_locale: str = DEFAULT_MOBILE_LOCALE,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        max_batch_size: int = 50,
    ):
        self.phone_region = phone_region
        self.mobile_locale = mobile_locale
        self.max_batch_size = max_batch_size

        self.parser = parser or ContactParser(
            extractor=FieldExtractor(
                phone_region=phone_region,
                mobile_locale=mobile_locale,
                vocabulary=vocabulary,
            )
        )
        self.vcard_parser = vcard_parser or VCardParser(vocabulary=vocabulary)

        logger.info("CardFusionPipeline initialized")

    # ======================================================
    # SINGLE CARD
    # ======================================================

    def process(
        self,
        lines: Optional[Sequence[str]] = None,
        qr_payload: Optional[str] = None,
        assistant_response: Any = None,
    ) -> FusionResult:
        """
        Process one card.

        Args:
            lines: Recognized text lines, top of card first
            qr_payload: Raw QR code content (vCard or URL), if any
            assistant_response: Language-model reply with contact fields, if any
        """
        start_time = time.time()

        # 1️⃣ OCR LINES
        ocr_contact = self.parser.parse(lines or [])

        # 2️⃣ LANGUAGE MODEL FIELDS
        assistant_contact = None
        if assistant_response is not None:
            assistant_contact = parse_assistant_response(assistant_response)

        # 3️⃣ QR PAYLOAD
        payload_kind = None
        qr_contact = None
        if qr_payload and qr_payload.strip():
            payload_kind, qr_contact = self.vcard_parser.parse_payload(qr_payload)
            logger.info(f"QR code detected: {payload_kind.value}")

        # 4️⃣ FUSION
        contact = merge(merge(ocr_contact, assistant_contact), qr_contact)

        result = FusionResult(
            contact=contact,
            ocr_contact=ocr_contact,
            qr_contact=qr_contact,
            assistant_contact=assistant_contact,
            payload_kind=payload_kind,
        )
        logger.debug(f"⏱️ Fusion: {(time.time() - start_time) * 1000:.1f}ms ({result.outcome.value})")
        return result

    def process_text(
        self,
        text: str,
        qr_payload: Optional[str] = None,
        assistant_response: Any = None,
    ) -> FusionResult:
        """Process newline-separated OCR text."""
        return self.process((text or "").split("\n"), qr_payload, assistant_response)

    # ======================================================
    # BATCH
    # ======================================================

    def process_batch(self, cards: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
        """Process several cards.

        Each card is a mapping with "lines" (or "text"), and optionally
        "qr_payload" and "assistant_response".
        """
        cards = list(cards)
        if len(cards) > self.max_batch_size:
            raise ValueError(f"Batch too large: {len(cards)} cards (max {self.max_batch_size})")

        results: List[Dict[str, Any]] = []
        successful = 0

        for card in cards:
            if card.get("lines") is not None:
                result = self.process(card["lines"], card.get("qr_payload"), card.get("assistant_response"))
            else:
                result = self.process_text(card.get("text", ""), card.get("qr_payload"), card.get("assistant_response"))
            results.append(result.to_dict())

            if result.outcome is not ExtractionOutcome.EMPTY:
                successful += 1

        logger.info(f"Batch processed: {successful}/{len(cards)} cards with contact data")

        return {
            "success": True,
            "total": len(cards),
            "successful": successful,
            "failed": len(cards) - successful,
            "results": results,
        }

    # ======================================================
    # STATUS
    # ======================================================

    def get_status(self) -> Dict[str, Any]:
        """Get pipeline status information."""
        return {
            "phone_region": self.phone_region,
            "mobile_locale": self.mobile_locale,
            "mobile_prefixes": list(self.parser.extractor.mobile_prefixes),
            "max_batch_size": self.max_batch_size,
        }
