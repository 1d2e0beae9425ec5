"""
Heuristic line classifier for business card text.

Scores a single OCR line as a person's name or as a company name. The
weights below were calibrated against real business cards; changing them
changes which line wins.
"""

import logging
import re

from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

# Name scoring
MIN_NAME_WORDS = 2
MAX_NAME_WORDS = 6
MAX_SPECIAL_CHARS = 2
TITLE_BONUS = 30
CAPITALIZED_BONUS = 20
TOP_POSITION_BONUS = 15
TOP_POSITION_LIMIT = 3
NAME_LENGTH_BONUS = 10
HYPHEN_BONUS = 5
NAME_MIN_SCORE = 15

# Company scoring
COMPANY_SUFFIX_BONUS = 50
UPPERCASE_BONUS = 25
UPPERCASE_MIN_LENGTH = 3
AMPERSAND_BONUS = 10
STRONG_NAME_SCORE = 20
STRONG_COMPANY_SCORE = 40

# Position used when the company scorer asks for a name score.
NEUTRAL_POSITION = 99


class LineClassifier:
    """Scores lines as name or company candidates.

    A score of 0 means the line is rejected for that category.
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary
        self._job_titles_lower = [t.lower() for t in vocabulary.job_titles]
        self._suffixes_lower = [s.lower() for s in vocabulary.company_suffixes]
        self._title_suffix_patterns = [
            re.compile(r"(?:,\s*|\s+)" + re.escape(title) + r"$", re.IGNORECASE)
            for title in vocabulary.job_titles
        ]

    def score_as_name(self, line: str, position: int) -> int:
        words = line.split()
        if not MIN_NAME_WORDS <= len(words) <= MAX_NAME_WORDS:
            return 0
        if any(c.isdigit() for c in line):
            return 0
        special = [c for c in line if not (c.isalpha() or c.isspace() or c in "-.")]
        if len(special) > MAX_SPECIAL_CHARS:
            return 0

        score = 0
        if any(title in line for title in self.vocabulary.academic_titles):
            score += TITLE_BONUS
        if all(word[0].isupper() for word in words):
            score += CAPITALIZED_BONUS
        if position < TOP_POSITION_LIMIT:
            score += TOP_POSITION_BONUS
        if len(words) <= 3:
            score += NAME_LENGTH_BONUS
        if "-" in line:
            score += HYPHEN_BONUS

        lower = line.lower()
        if any(word in lower for word in self.vocabulary.non_name_words):
            return 0
        if self.is_job_title(line):
            return 0

        return score if score >= NAME_MIN_SCORE else 0

    def score_as_company(self, line: str) -> int:
        score = 0
        lower = line.lower()
        if any(suffix in lower for suffix in self._suffixes_lower):
            score += COMPANY_SUFFIX_BONUS
        if (len(line) > UPPERCASE_MIN_LENGTH and line == line.upper()
                and any(c.isalpha() for c in line)):
            score += UPPERCASE_BONUS
        if "&" in line or "+" in line:
            score += AMPERSAND_BONUS

        # A strong name signal beats a weak company signal.
        if score < STRONG_COMPANY_SCORE and self.score_as_name(line, NEUTRAL_POSITION) > STRONG_NAME_SCORE:
            score = 0
        return score

    def is_job_title(self, line: str) -> bool:
        """True if the line names a role rather than a person.

        A name followed by a comma and a role ("Jane Doe, CEO") is not a job
        title line: the role is checked on what remains after stripping it.
        Without the comma ("Jane Doe CEO") the line stays a job title, since it
        reads the same as "Senior Software Engineer".
        """
        text = line.strip()
        stripped = self.strip_job_title(text)
        if "," in text and stripped != text and len(stripped.split()) >= MIN_NAME_WORDS:
            text = stripped
        lower = text.lower()
        return any(title in lower for title in self._job_titles_lower)

    def strip_job_title(self, name: str) -> str:
        """Remove trailing job titles, with their comma or space, from a name."""
        cleaned = name.strip()
        changed = True
        while changed:
            changed = False
            for pattern in self._title_suffix_patterns:
                shorter = pattern.sub("", cleaned).strip()
                if shorter != cleaned and shorter:
                    cleaned = shorter
                    changed = True
        return cleaned

    def is_company_line(self, line: str) -> bool:
        return self.score_as_company(line) >= STRONG_COMPANY_SCORE
