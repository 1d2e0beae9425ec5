"""
vCard and URL parsing for QR code payloads.

Supports the vCard 2.1, 3.0 and 4.0 text formats at the level found in QR
codes on business cards: line unfolding, property parameters, value escapes
and quoted-printable values. Malformed lines are skipped one by one; parsing
never raises.
"""

import logging
import quopri
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .contact import ContactCandidate
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

VCARD_BEGIN = "BEGIN:VCARD"

QP_ESCAPE = re.compile(r"=[0-9A-Fa-f]{2}")
VALUE_ESCAPE = re.compile(r"\\([nN,;:\\])")
PHONE_CHARS = re.compile(r"[^0-9+\-() ]")

# ADR components: PO box;extended;street;city;region;postal code;country
ADR_STREET, ADR_CITY, ADR_POSTAL, ADR_COUNTRY = 2, 3, 5, 6


class PayloadKind(Enum):
    VCARD = "vcard"
    URL = "url"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class VCardProperty:
    """One unfolded vCard line split into name, parameters and raw value."""
    name: str
    params: Dict[str, str] = field(default_factory=dict)
    value: str = ""

    @classmethod
    def from_line(cls, line: str) -> Optional["VCardProperty"]:
        parts = _split_unescaped(line, ":", maxsplit=1)
        if len(parts) < 2:
            return None
        head, value = parts
        segments = _split_unescaped(head, ";")
        # Drop a group prefix such as "item1.EMAIL"
        name = segments[0].strip().upper().rsplit(".", 1)[-1]
        if not name:
            return None

        params: Dict[str, str] = {}
        for segment in segments[1:]:
            segment = segment.strip()
            if not segment:
                continue
            if "=" in segment:
                key, param_value = segment.split("=", 1)
                key = key.strip().upper()
            else:
                key, param_value = "TYPE", segment
            param_value = param_value.strip().strip('"')
            params[key] = f"{params[key]},{param_value}" if key in params else param_value

        return cls(name=name, params=params, value=value.strip())

    @property
    def types(self) -> List[str]:
        return [t.strip().upper() for t in self.params.get("TYPE", "").split(",") if t.strip()]

    def decoded(self, raw: Optional[str] = None) -> str:
        """Decode the value (or one component of it)."""
        return decode_value(self.value if raw is None else raw, self.params)

    def components(self) -> List[str]:
        """Decoded components of a structured value (N, ADR, ORG)."""
        return [self.decoded(part) for part in _split_unescaped(self.value, ";")]


class VCardParser:
    """Parses vCard text and bare URLs into ContactCandidates."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    # =========================
    # VCARD
    # =========================

    def parse(self, raw: str) -> ContactCandidate:
        fields: Dict[str, str] = {}
        formatted_name = False

        for line in unfold(raw or ""):
            line = line.strip()
            if not line:
                continue
            prop = VCardProperty.from_line(line)
            if prop is None:
                logger.debug(f"Skipping vCard line without property: {line[:40]}")
                continue

            if prop.name == "FN":
                if not formatted_name:
                    name = prop.decoded()
                    if name:
                        fields["name"] = name
                        formatted_name = True
            elif prop.name == "N":
                if not fields.get("name"):
                    fields["name"] = _structured_name(prop.components())
            elif prop.name == "ORG":
                if not fields.get("company"):
                    fields["company"] = prop.components()[0]
            elif prop.name == "EMAIL":
                if not fields.get("email"):
                    fields["email"] = prop.decoded().lower()
            elif prop.name == "TEL":
                phone = clean_phone(prop.decoded())
                if phone and (not fields.get("phone") or _is_mobile(prop)):
                    fields["phone"] = phone
            elif prop.name == "URL":
                if not fields.get("website_or_url"):
                    # query strings like "?id=42" are not quoted-printable
                    fields["website_or_url"] = decode_value(prop.value, prop.params, sniff=False)
            elif prop.name == "ADR":
                if not fields.get("address"):
                    fields["address"] = _address(prop.components())
            elif prop.name == "TITLE":
                title = prop.decoded()
                if title:
                    fields["title"] = title

        contact = ContactCandidate(**fields)
        logger.debug(f"vCard parsed - name: {contact.name}, has_data: {contact.has_data}")
        return contact

    parse_vcard = parse

    # =========================
    # URL
    # =========================

    def parse_url(self, url: str) -> ContactCandidate:
        """Keep the URL and guess the company from its domain."""
        url = (url or "").strip()
        host = _host_of(url)
        company = None
        if host:
            domain = host[4:] if host.startswith("www.") else host
            if domain and not self._is_social(domain):
                company = domain[0].upper() + domain[1:]
        return ContactCandidate(website_or_url=url, company=company)

    def _is_social(self, domain: str) -> bool:
        return any(
            domain == known or domain.endswith("." + known)
            for known in self.vocabulary.social_domains
        )

    # =========================
    # QR PAYLOAD
    # =========================

    def parse_payload(self, payload: Optional[str]) -> Tuple[PayloadKind, Optional[ContactCandidate]]:
        kind = classify_payload(payload)
        if kind is PayloadKind.VCARD:
            return kind, self.parse(payload)
        if kind is PayloadKind.URL:
            return kind, self.parse_url(payload)
        if payload and payload.strip():
            logger.info(f"QR payload with unknown format: {payload.strip()[:100]}")
        return kind, None


def classify_payload(payload: Optional[str]) -> PayloadKind:
    text = (payload or "").strip()
    if text.upper().startswith(VCARD_BEGIN):
        return PayloadKind.VCARD
    if re.match(r"^(?:https?://|www\.)\S+$", text, re.IGNORECASE):
        return PayloadKind.URL
    return PayloadKind.UNKNOWN


# =========================
# DECODING HELPERS
# =========================

def unfold(text: str) -> List[str]:
    """Split vCard text into logical lines.

    A physical line starting with a space or tab continues the previous one;
    the newline and that one whitespace character are removed. A
    quoted-printable value ending in "=" continues on the next line.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    logical: List[str] = []
    for line in text.split("\n"):
        if logical and line[:1] in (" ", "\t"):
            logical[-1] += line[1:]
        elif logical and _has_soft_break(logical[-1]):
            logical[-1] = logical[-1][:-1] + line
        else:
            logical.append(line)
    return logical


def decode_value(value: str, params: Optional[Dict[str, str]] = None, sniff: bool = True) -> str:
    """Undo vCard escapes, then quoted-printable encoding.

    With `sniff`, any "=XX" hex sequence triggers quoted-printable decoding
    even without an ENCODING parameter.
    """
    params = params or {}
    decoded = VALUE_ESCAPE.sub(lambda m: "\n" if m.group(1) in "nN" else m.group(1), value)

    encoding = params.get("ENCODING", "").upper()
    if encoding in ("QUOTED-PRINTABLE", "QP") or (sniff and QP_ESCAPE.search(decoded)):
        decoded = _decode_quoted_printable(decoded, params.get("CHARSET") or "utf-8")

    return decoded.strip()


def clean_phone(phone: str) -> str:
    """Keep digits, '+', '-', parentheses and spaces."""
    return PHONE_CHARS.sub("", phone or "").strip()


def _decode_quoted_printable(text: str, charset: str) -> str:
    raw = quopri.decodestring(text.encode("utf-8"))
    try:
        return raw.decode(charset)
    except (LookupError, UnicodeDecodeError):
        return raw.decode("latin-1")


def _has_soft_break(line: str) -> bool:
    if not line.endswith("="):
        return False
    head = line.split(":", 1)[0].upper()
    return "QUOTED-PRINTABLE" in head


def _split_unescaped(text: str, sep: str, maxsplit: int = -1) -> List[str]:
    """Split on `sep` unless it is preceded by a backslash escape."""
    parts: List[str] = []
    current: List[str] = []
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            current.append(char)
            escaped = True
        elif char == sep and (maxsplit < 0 or len(parts) < maxsplit):
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _structured_name(parts: List[str]) -> str:
    # N: family;given;additional;prefix;suffix
    family = parts[0] if parts else ""
    given = parts[1] if len(parts) > 1 else ""
    return " ".join(p for p in (given, family) if p)


def _address(parts: List[str]) -> str:
    def part(index: int) -> str:
        return parts[index] if len(parts) > index else ""

    city_line = " ".join(p for p in (part(ADR_POSTAL), part(ADR_CITY)) if p)
    return ", ".join(p for p in (part(ADR_STREET), city_line, part(ADR_COUNTRY)) if p)


def _is_mobile(prop: VCardProperty) -> bool:
    return any("CELL" in t or "MOBILE" in t for t in prop.types)


def _host_of(url: str) -> str:
    if not re.match(r"^[a-z][a-z0-9+.-]*://", url, re.IGNORECASE):
        url = "http://" + url
    try:
        host = urlparse(url).hostname
    except ValueError:
        return ""
    return (host or "").lower()


_default_parser = VCardParser()


def parse_vcard(raw: str) -> ContactCandidate:
    return _default_parser.parse(raw)


def parse_url(url: str) -> ContactCandidate:
    return _default_parser.parse_url(url)


def parse_payload(payload: Optional[str]) -> Tuple[PayloadKind, Optional[ContactCandidate]]:
    return _default_parser.parse_payload(payload)
