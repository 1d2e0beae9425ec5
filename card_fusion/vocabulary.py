"""
Vocabulary tables used by the line classifier and the field extractors.

The tables are immutable and handed to the classifier at construction time,
so tests can substitute their own word lists.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Vocabulary:
    """Word lists driving the business card heuristics.

    Attributes:
        academic_titles: Tokens that mark a person's name ("Dr.", "MBA").
        job_titles: Role names; a line made of these is not a name.
        company_suffixes: Legal-form suffixes ("GmbH", "Inc.").
        address_indicators: Street and postal tokens.
        non_name_words: Lower-case fragments that veto a name.
        social_domains: Hosts never used as a company guess.
    """
    academic_titles: Tuple[str, ...]
    job_titles: Tuple[str, ...]
    company_suffixes: Tuple[str, ...]
    address_indicators: Tuple[str, ...]
    non_name_words: Tuple[str, ...]
    social_domains: Tuple[str, ...]


DEFAULT_VOCABULARY = Vocabulary(
    academic_titles=(
        "Dr.", "Prof.", "Prof. Dr.", "Dr.-Ing.", "Dipl.-Ing.", "Dipl.-Kfm.",
        "Dr. med.", "Dr. jur.", "Dr. rer. nat.", "Dr. phil.", "MBA", "M.Sc.", "B.Sc.",
        "Mag.", "DI", "Ing.", "RA", "StB", "WP",
    ),
    job_titles=(
        "CEO", "CTO", "CFO", "COO", "CMO", "CIO",
        "Geschäftsführer", "Geschäftsführerin", "Managing Director",
        "Vorstand", "Vorstandsvorsitzender", "Vorstandsvorsitzende",
        "Director", "Manager", "Senior Manager", "Partner",
        "Head of", "Leiter", "Leiterin", "Abteilungsleiter",
        "Sales", "Marketing", "Vertrieb", "Account", "Berater", "Consultant",
        "Engineer", "Developer", "Designer", "Architect",
        "Assistant", "Assistentin", "Sekretär", "Sekretärin",
        "Projektleiter", "Projektmanager", "Team Lead",
    ),
    company_suffixes=(
        # German
        "GmbH", "GmbH & Co. KG", "GmbH & Co. KGaA", "AG", "SE", "KG", "OHG", "e.V.", "e.G.",
        "mbH", "UG", "UG (haftungsbeschränkt)", "KGaA", "PartG", "PartGmbB",
        # International
        "Inc.", "Inc", "Corp.", "Corp", "Corporation", "Ltd.", "Ltd", "Limited",
        "LLC", "LLP", "Co.", "Co", "& Co.", "& Co", "PLC", "S.A.", "S.L.", "B.V.", "N.V.",
        "Pty Ltd", "Pty", "SRL", "SpA", "SARL", "SAS",
    ),
    address_indicators=(
        "Straße", "Str.", "Strasse", "Weg", "Platz", "Allee", "Ring", "Gasse",
        "Street", "St.", "Road", "Rd.", "Avenue", "Ave.", "Boulevard", "Blvd.",
        "PLZ", "Postfach", "PO Box",
    ),
    non_name_words=(
        "straße", "str.", "platz", "gmbh", "ag", "ug", "tel", "fax", "www", "http",
    ),
    social_domains=(
        "linkedin.com", "xing.com", "facebook.com", "twitter.com", "instagram.com",
    ),
)

# Digit-only prefixes of mobile numbers, per locale.
# German mobiles start with +49 1... or 01... .
MOBILE_PREFIXES: Dict[str, Tuple[str, ...]] = {
    "DE": ("491", "01"),
}

DEFAULT_MOBILE_LOCALE = "DE"
DEFAULT_PHONE_REGION = "DE"


def mobile_prefixes_for(locale: str) -> Tuple[str, ...]:
    """Return the mobile prefixes of a locale, falling back to the default."""
    return MOBILE_PREFIXES.get(locale.upper(), MOBILE_PREFIXES[DEFAULT_MOBILE_LOCALE])
