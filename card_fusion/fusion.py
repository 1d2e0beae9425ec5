"""
Contact fusion: reconciles OCR, QR and manual form data.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional, Tuple
from urllib.parse import quote

from .contact import CORE_FIELDS, ContactCandidate

logger = logging.getLogger(__name__)

LINKEDIN_SEARCH_URL = "https://www.linkedin.com/search/results/all/?keywords="


class CardFusionError(Exception):
    """Base error for contact handling outside the extraction core."""


class EmptyContactError(CardFusionError):
    """Raised when a contact without name, company, email or phone is saved."""


def merge(ocr: ContactCandidate, qr: Optional[ContactCandidate] = None) -> ContactCandidate:
    """Field-level merge: every non-empty `qr` field wins over `ocr`.

    A missing `qr`, or one without name, company, email or phone, leaves
    `ocr` untouched.
    """
    if qr is None or not qr.has_data:
        return ocr
    merged = {
        f.name: getattr(qr, f.name) or getattr(ocr, f.name)
        for f in fields(ContactCandidate)
    }
    return ContactCandidate(**merged)


@dataclass
class ContactForm:
    """User-editable contact form.

    Recognized data only fills fields the user left empty; manual input is
    never overwritten.
    """
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    notes: str = ""

    def fill_from(self, contact: ContactCandidate, url: Optional[str] = None) -> int:
        """Copy recognized values into empty fields.

        Args:
            contact: Fused contact
            url: QR code URL; used for the website field when present

        Returns:
            Number of fields that were filled
        """
        updated = 0
        for name in CORE_FIELDS:
            value = getattr(contact, name)
            if value and not getattr(self, name).strip():
                setattr(self, name, value)
                updated += 1

        website = url or contact.website_or_url
        if website and website.strip() and not self.website.strip():
            self.website = website.strip()
            updated += 1

        logger.debug(f"Form filled with {updated} recognized field(s)")
        return updated

    @property
    def is_valid(self) -> bool:
        return any(getattr(self, name).strip() for name in CORE_FIELDS)

    def to_record(self) -> Dict[str, str]:
        """Normalized values for persistence.

        Raises:
            EmptyContactError: If name, company, email and phone are all blank
        """
        if not self.is_valid:
            raise EmptyContactError("contact has no name, company, email or phone")
        record = {key: value.strip() for key, value in asdict(self).items()}
        record["email"] = record["email"].lower()
        return record

    def split_name(self) -> Tuple[Optional[str], Optional[str]]:
        """Split the name into (given, family) on the first space."""
        parts = self.name.strip().split(" ", 1)
        if not parts[0]:
            return None, None
        if len(parts) == 1:
            return parts[0], None
        return parts[0], parts[1].strip() or None

    def linkedin_search_url(self) -> Optional[str]:
        terms = [t for t in (self.name.strip(), self.company.strip()) if t]
        if not terms:
            return None
        return LINKEDIN_SEARCH_URL + quote(" ".join(terms))

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ContactForm":
        data = data or {}
        return cls(**{
            f.name: str(data.get(f.name) or "")
            for f in fields(cls)
        })
