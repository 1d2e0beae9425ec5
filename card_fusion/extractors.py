"""
Per-line field extractors for OCR text.

Emails and phone numbers are pulled out of a single recognized line. The
extractors never raise; a line without a match simply yields an empty list.
"""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import unquote

import phonenumbers

from .vocabulary import (
    DEFAULT_MOBILE_LOCALE,
    DEFAULT_PHONE_REGION,
    DEFAULT_VOCABULARY,
    Vocabulary,
    mobile_prefixes_for,
)

logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 8

PHONE_LABEL = r"(?:Telefon|Telephone|Phone|Mobile|Mobil|Handy|Fon|Tel)"


class FieldExtractor:
    """Scans one line of text for emails and phone numbers."""

    PATTERNS = {
        "mailto": re.compile(r"mailto:([^\s?&<>\"']+)", re.IGNORECASE),
        "email": re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", re.IGNORECASE),
        "phone_label": re.compile(PHONE_LABEL + r"[:\s]*", re.IGNORECASE),
        "postal_code": re.compile(r"\d{5}\s+[A-ZÄÖÜ]"),
        # bank, tax and register identifiers look like phone numbers
        "identifier_label": re.compile(
            r"\b(?:IBAN|BIC|SWIFT|USt|UID|VAT|HRA|HRB|St\.?-?Nr|Steuer-?(?:nr|nummer)|Tax\s*(?:ID|No)|"
            r"Amtsgericht|Registergericht|Konto|Kto|BLZ)\b",
            re.IGNORECASE
        ),
    }

    # Tried in order when the phone number matcher finds nothing.
    PHONE_FALLBACKS = [
        # international
        re.compile(r"\+\d{1,3}[\s\-]?\d{2,4}[\s\-]?\d{3,4}[\s\-]?\d{2,4}", re.IGNORECASE),
        # domestic, leading zero
        re.compile(r"0\d{2,4}[\s\-/]?\d{3,8}", re.IGNORECASE),
        # parenthesized area code
        re.compile(r"\(\d{2,5}\)[\s\-]?\d{3,10}", re.IGNORECASE),
        # labelled
        re.compile(PHONE_LABEL + r"[:\s]*[\d\s\-\(\)\+/]{8,}", re.IGNORECASE),
    ]

    WEBSITE_PATTERNS = [
        re.compile(r"www\.", re.IGNORECASE),
        re.compile(r"https?://", re.IGNORECASE),
        re.compile(r"\.[a-z]{2,4}(?:/|$)", re.IGNORECASE),
    ]

    def __init__(
        self,
        phone_region: str = DEFAULT_PHONE_REGION,
        mobile_locale: str = DEFAULT_MOBILE_LOCALE,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self.phone_region = phone_region
        self.mobile_prefixes = mobile_prefixes_for(mobile_locale)
        self.vocabulary = vocabulary
        self._address_indicators = [a.lower() for a in vocabulary.address_indicators]

    # =========================
    # EMAIL
    # =========================

    def extract_emails(self, text: str) -> List[str]:
        """Return all emails on a line, deduplicated case-insensitively."""
        found = []
        for m in self.PATTERNS["mailto"].finditer(text):
            address = unquote(m.group(1)).strip()
            if "@" in address:
                found.append(address)
        found.extend(m.group(0) for m in self.PATTERNS["email"].finditer(text))
        return _unique(found, key=str.lower)

    def extract_email(self, text: str) -> Optional[str]:
        """Return the first email on a line, lower-cased."""
        emails = self.extract_emails(text)
        return emails[0].lower() if emails else None

    # =========================
    # PHONE
    # =========================

    def extract_phones(self, text: str) -> List[str]:
        """Return valid phone numbers on a line with at least 8 digits.

        Lines carrying a bank, tax or register identifier yield nothing.
        """
        if self.is_identifier(text):
            return []

        phones = [
            match.raw_string
            for match in phonenumbers.PhoneNumberMatcher(
                text, self.phone_region, leniency=phonenumbers.Leniency.VALID
            )
        ]

        if not phones:
            for pattern in self.PHONE_FALLBACKS:
                m = pattern.search(text)
                if m:
                    phones.append(self.PATTERNS["phone_label"].sub("", m.group(0)))

        accepted = [p.strip() for p in phones if _digit_count(p) >= MIN_PHONE_DIGITS]
        return _unique(accepted)

    def is_mobile(self, phone: str) -> bool:
        digits = "".join(c for c in phone if c.isdigit())
        return digits.startswith(self.mobile_prefixes)

    def select_best_phone(self, phones: Iterable[str]) -> Optional[str]:
        """Prefer the first mobile number, else the first number seen."""
        phones = list(phones)
        for phone in phones:
            if self.is_mobile(phone):
                return phone
        return phones[0] if phones else None

    # =========================
    # LINE TYPES
    # =========================

    def is_website(self, text: str) -> bool:
        return any(p.search(text) for p in self.WEBSITE_PATTERNS)

    def is_identifier(self, text: str) -> bool:
        return bool(self.PATTERNS["identifier_label"].search(text))

    def is_address(self, text: str) -> bool:
        lower = text.lower()
        if any(indicator in lower for indicator in self._address_indicators):
            return True
        return bool(self.PATTERNS["postal_code"].search(text))


def _digit_count(text: str) -> int:
    return sum(c.isdigit() for c in text)


def _unique(values: Iterable[str], key=None) -> List[str]:
    seen = set()
    result = []
    for value in values:
        marker = key(value) if key else value
        if value and marker not in seen:
            seen.add(marker)
            result.append(value)
    return result
