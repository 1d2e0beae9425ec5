"""
Adapter for language-model field extraction.

The request to the model happens elsewhere; this module only turns the
model's reply (JSON, possibly wrapped in a markdown code block) into a
ContactCandidate.
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional

from .contact import ContactCandidate

logger = logging.getLogger(__name__)

# reply key -> ContactCandidate field
FIELD_MAP = {
    "name": "name",
    "company": "company",
    "email": "email",
    "phone": "phone",
    "job_title": "title",
    "title": "title",
    "website": "website_or_url",
    "address": "address",
}


def parse_response(response_text: str) -> Dict[str, Any]:
    """Parse JSON from a model reply."""
    if not response_text:
        return {}
    try:
        data = json.loads(response_text)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError:
        # Try to extract JSON from markdown code block
        json_match = re.search(r'```(?:json)?\s*([\s\S]*?)\s*```', response_text)
        if json_match:
            try:
                data = json.loads(json_match.group(1))
                return data if isinstance(data, dict) else {}
            except json.JSONDecodeError:
                pass

        # Try to find JSON object in text
        json_match = re.search(r'\{[\s\S]*\}', response_text)
        if json_match:
            try:
                data = json.loads(json_match.group(0))
                return data if isinstance(data, dict) else {}
            except json.JSONDecodeError:
                pass

    logger.warning("Could not parse JSON from assistant response")
    return {}


def candidate_from_fields(data: Optional[Mapping[str, Any]]) -> ContactCandidate:
    values: Dict[str, str] = {}
    for key, target in FIELD_MAP.items():
        value = (data or {}).get(key)
        if isinstance(value, str) and value.strip() and target not in values:
            values[target] = value
    return ContactCandidate(**values)


def parse_assistant_response(response: Any) -> ContactCandidate:
    """Accept a raw reply string or an already decoded mapping."""
    if isinstance(response, Mapping):
        return candidate_from_fields(response)
    if isinstance(response, str):
        return candidate_from_fields(parse_response(response))
    return ContactCandidate()
