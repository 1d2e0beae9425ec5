import logging
from typing import List, Optional, Sequence

from .classifier import LineClassifier, STRONG_COMPANY_SCORE
from .contact import ContactCandidate, ScoredLine
from .extractors import FieldExtractor

logger = logging.getLogger(__name__)


# =========================
# PARSER
# =========================

class ContactParser:
    """Turns ordered OCR lines into one ContactCandidate.

    Lines are expected top-of-card first. The parser never raises: lines
    without any signal produce an empty candidate.
    """

    def __init__(
        self,
        extractor: Optional[FieldExtractor] = None,
        classifier: Optional[LineClassifier] = None,
    ):
        self.extractor = extractor or FieldExtractor()
        self.classifier = classifier or LineClassifier()

    # =========================
    # PIPELINE API
    # =========================

    def parse(self, lines: Sequence[str]) -> ContactCandidate:
        emails: List[str] = []
        phones: List[str] = []
        names: List[ScoredLine] = []
        companies: List[ScoredLine] = []
        title: Optional[str] = None

        for position, raw in enumerate(lines):
            line = (raw or "").strip()
            if not line:
                continue

            line_emails = self.extractor.extract_emails(line)
            line_phones = self.extractor.extract_phones(line)
            emails.extend(line_emails)
            phones.extend(line_phones)

            if self._is_excluded(line, line_emails, line_phones):
                continue

            company_score = self.classifier.score_as_company(line)
            if company_score > 0:
                companies.append(ScoredLine(line, company_score, position))

            name_score = self.classifier.score_as_name(line, position)
            if name_score > 0:
                names.append(ScoredLine(line, name_score, position))
            elif title is None and self._is_title_line(line, company_score):
                title = line

        logger.debug(
            f"Candidates - names: {len(names)}, companies: {len(companies)}, "
            f"emails: {len(emails)}, phones: {len(phones)}"
        )

        return ContactCandidate(
            name=self._select_name(names),
            company=self._select_company(companies),
            email=emails[0].lower() if emails else None,
            phone=self.extractor.select_best_phone(phones),
            title=title,
        )

    def parse_text(self, text: str) -> ContactCandidate:
        return self.parse((text or "").split("\n"))

    # =========================
    # HELPERS
    # =========================

    def _is_excluded(self, line: str, emails: List[str], phones: List[str]) -> bool:
        """Website, address, identifier and contact-detail lines are never names or companies."""
        return (
            bool(emails)
            or bool(phones)
            or self.extractor.is_website(line)
            or self.extractor.is_address(line)
            or self.extractor.is_identifier(line)
        )

    def _is_title_line(self, line: str, company_score: int) -> bool:
        return company_score < STRONG_COMPANY_SCORE and self.classifier.is_job_title(line)

    def _select_name(self, names: List[ScoredLine]) -> Optional[str]:
        if not names:
            return None
        best = min(names, key=lambda c: (-c.score, c.position))
        return self.classifier.strip_job_title(best.text)

    def _select_company(self, companies: List[ScoredLine]) -> Optional[str]:
        # max() keeps the first of equally scored lines
        if not companies:
            return None
        return max(companies, key=lambda c: c.score).text
