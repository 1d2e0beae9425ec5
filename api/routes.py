"""
API routes for Business Card Fusion API.

Flask REST API endpoints wrapping the extraction pipeline.
"""

import logging
from dataclasses import asdict
from typing import Optional

from flask import Blueprint, request, jsonify

from card_fusion import CardFusionPipeline, ContactCandidate, ContactForm, merge
from card_fusion.contact import ExtractionOutcome
from card_fusion.fusion import EmptyContactError
from card_fusion.messages import error_message
from config import Config

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")

# Pipeline instance (lazy initialization)
_pipeline: Optional[CardFusionPipeline] = None


def get_pipeline() -> CardFusionPipeline:
    """Get or create pipeline instance.

    Returns:
        CardFusionPipeline instance
    """
    global _pipeline

    if _pipeline is None:
        _pipeline = CardFusionPipeline(**Config.get_extraction_settings())
        logger.info(f"Pipeline initialized for region {Config.PHONE_REGION}")

    return _pipeline


def bad_request_response(message: str):
    return jsonify({
        "success": False,
        "error": message
    }), 400


def is_line_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(line, str) for line in value)


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint.

    Returns:
        JSON with health status
    """
    return jsonify({
        "success": True,
        "status": "healthy",
        "message": "Business Card Fusion API is running",
        "version": "1.0.0"
    }), 200


@api_bp.route("/status", methods=["GET"])
def get_status():
    """Get API and pipeline status.

    Returns:
        JSON with status information
    """
    try:
        pipeline = get_pipeline()
        status = pipeline.get_status()

        return jsonify({
            "success": True,
            "data": {
                "api_status": "running",
                "pipeline_status": status
            }
        }), 200

    except Exception as e:
        logger.error(f"Error getting status: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500


@api_bp.route("/parse", methods=["POST"])
def parse_card():
    """Extract one contact from OCR lines and an optional QR payload.

    Expects:
        - JSON body with 'lines' (list of strings, top of card first)
        - Optional 'qr_payload' (vCard text or URL)
        - Optional 'assistant_response' (language-model JSON reply)

    Returns:
        JSON with the fused contact and the per-source contacts
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return bad_request_response("No data provided. Send JSON with 'lines' and/or 'qr_payload'.")

    lines = data.get("lines", [])
    qr_payload = data.get("qr_payload")
    assistant_response = data.get("assistant_response")

    if not is_line_list(lines):
        return bad_request_response("'lines' must be a list of strings")
    if qr_payload is not None and not isinstance(qr_payload, str):
        return bad_request_response("'qr_payload' must be a string")
    if not lines and not qr_payload and assistant_response is None:
        return bad_request_response("Provide 'lines', 'qr_payload' or 'assistant_response'")

    result = get_pipeline().process(lines, qr_payload, assistant_response)
    logger.info(f"Parsed card: {result.outcome.value}")

    return jsonify(result.to_dict()), 200


@api_bp.route("/parse-text", methods=["POST"])
def parse_text():
    """Parse raw newline-separated OCR text.

    Expects:
        - JSON body with 'text' field
        - Optional 'qr_payload'

    Returns:
        JSON with parsed contact data
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        return bad_request_response("No text provided. Send JSON with 'text' field.")
    if data.get("qr_payload") is not None and not isinstance(data["qr_payload"], str):
        return bad_request_response("'qr_payload' must be a string")

    result = get_pipeline().process_text(
        data["text"],
        qr_payload=data.get("qr_payload"),
        assistant_response=data.get("assistant_response")
    )

    return jsonify({
        "success": result.outcome is not ExtractionOutcome.EMPTY,
        "data": result.to_dict()
    }), 200


@api_bp.route("/parse-payload", methods=["POST"])
def parse_payload():
    """Parse a QR code payload on its own.

    Expects:
        - JSON body with 'payload' (vCard text or URL)

    Returns:
        JSON with the payload kind and the decoded contact
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("payload"), str):
        return bad_request_response("No payload provided. Send JSON with 'payload' field.")

    kind, contact = get_pipeline().vcard_parser.parse_payload(data["payload"])

    return jsonify({
        "success": contact is not None,
        "data": {
            "kind": kind.value,
            "has_data": bool(contact and contact.has_data),
            "contact": contact.to_dict() if contact else None
        }
    }), 200


@api_bp.route("/merge", methods=["POST"])
def merge_contacts():
    """Merge an OCR contact with a QR contact (QR wins per field).

    Expects:
        - JSON body with 'ocr' and optional 'qr' contact objects
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("ocr"), dict):
        return bad_request_response("Send JSON with an 'ocr' contact object.")
    if data.get("qr") is not None and not isinstance(data["qr"], dict):
        return bad_request_response("'qr' must be a contact object")

    ocr = ContactCandidate.from_dict(data["ocr"])
    qr = ContactCandidate.from_dict(data["qr"]) if data.get("qr") is not None else None
    merged = merge(ocr, qr)

    return jsonify({
        "success": True,
        "data": {
            "contact": merged.to_dict(),
            "outcome": ExtractionOutcome.of(merged).value,
            "has_data": merged.has_data
        }
    }), 200


@api_bp.route("/form", methods=["POST"])
def fill_form():
    """Fill a manually edited form with recognized data.

    Expects:
        - JSON body with 'form' (current form values), 'contact'
          (recognized contact), optional 'url' (QR code URL)
        - Optional 'save': true to also return the normalized record

    Returns:
        JSON with the filled form, number of filled fields and the record
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not data:
        return bad_request_response("No data provided. Send JSON with 'form' and 'contact'.")
    if data.get("form") is not None and not isinstance(data["form"], dict):
        return bad_request_response("'form' must be an object")
    if data.get("contact") is not None and not isinstance(data["contact"], dict):
        return bad_request_response("'contact' must be an object")

    form = ContactForm.from_dict(data.get("form"))
    updated = form.fill_from(ContactCandidate.from_dict(data.get("contact")), url=data.get("url") if isinstance(data.get("url"), str) else None)
    first_name, last_name = form.split_name()

    response = {
        "form": asdict(form),
        "updated_fields": updated,
        "is_valid": form.is_valid,
        "first_name": first_name,
        "last_name": last_name,
        "linkedin_search_url": form.linkedin_search_url()
    }

    if data.get("save"):
        try:
            response["record"] = form.to_record()
        except EmptyContactError as e:
            logger.info("Rejected empty contact form")
            return jsonify({
                "success": False,
                "error": error_message(e),
                "data": response
            }), 400

    return jsonify({
        "success": True,
        "data": response
    }), 200


@api_bp.route("/batch", methods=["POST"])
def process_batch():
    """Process several cards in one request.

    Expects:
        - JSON body with 'cards': list of objects with 'lines' or 'text',
          and optional 'qr_payload' / 'assistant_response'
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("cards"), list):
        return bad_request_response("No cards provided. Send JSON with a 'cards' list.")

    cards = data["cards"]
    if len(cards) > Config.MAX_BATCH_SIZE:
        return bad_request_response(f"Too many cards. Maximum per batch: {Config.MAX_BATCH_SIZE}")

    for card in cards:
        if not isinstance(card, dict):
            return bad_request_response("Each card must be an object")
        if card.get("lines") is not None and not is_line_list(card["lines"]):
            return bad_request_response("'lines' must be a list of strings")
        if card.get("lines") is None and not isinstance(card.get("text", ""), str):
            return bad_request_response("'text' must be a string")
        if card.get("qr_payload") is not None and not isinstance(card["qr_payload"], str):
            return bad_request_response("'qr_payload' must be a string")

    result = get_pipeline().process_batch(cards)
    return jsonify(result), 200
