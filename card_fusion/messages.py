"""
User-facing texts for extraction results and contact errors.

The extraction modules only report outcomes; wording lives here.
"""

from .contact import ExtractionOutcome
from .fusion import CardFusionError, EmptyContactError

OUTCOME_MESSAGES = {
    ExtractionOutcome.EMPTY: (
        "No contact details (name, email, phone) were recognized. "
        "Please enter them manually."
    ),
    ExtractionOutcome.PARTIAL: (
        "Some contact details were recognized. Please check and complete the form."
    ),
    ExtractionOutcome.COMPLETE: "Contact details recognized.",
}

ERROR_MESSAGES = {
    EmptyContactError: "Please fill in at least one contact field.",
}

GENERIC_ERROR = "Something went wrong. Please enter the contact details manually."


def outcome_message(outcome: ExtractionOutcome) -> str:
    return OUTCOME_MESSAGES[outcome]


def error_message(error: Exception) -> str:
    for error_type, message in ERROR_MESSAGES.items():
        if isinstance(error, error_type):
            return message
    if isinstance(error, CardFusionError):
        return str(error)
    return GENERIC_ERROR
