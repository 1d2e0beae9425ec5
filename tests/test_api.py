"""
Tests for Flask API routes.

Tests the REST API endpoints.
"""

import pytest
import json
from unittest.mock import Mock, patch

from app import create_app
from config import Config, DevelopmentConfig, TestingConfig, get_config

VCARD = "BEGIN:VCARD\nVERSION:3.0\nFN:Jane Doe\nORG:Acme GmbH\nEMAIL:jane@acme.com\nEND:VCARD"


class TestAPIRoutes:
    """Test cases for API routes."""

    @pytest.fixture
    def app(self):
        """Create test Flask app."""
        app = create_app("testing")
        app.config["TESTING"] = True
        return app

    @pytest.fixture
    def client(self, app):
        """Create test client."""
        return app.test_client()

    def test_root_endpoint(self, client):
        """Test root endpoint returns API info."""
        response = client.get("/")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert "name" in data
        assert "version" in data
        assert "endpoints" in data

    def test_api_info(self, client):
        """Test API info endpoint."""
        response = client.get("/api/info")

        assert response.status_code == 200
        assert "parse" in json.loads(response.data)["endpoints"]

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is True
        assert data["status"] == "healthy"

    def test_status_endpoint(self, client):
        """Test status endpoint."""
        response = client.get("/api/status")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is True
        assert data["data"]["pipeline_status"]["phone_region"] == "DE"

    def test_status_endpoint_error(self, client):
        """Test status endpoint when the pipeline fails."""
        with patch("api.routes.get_pipeline", side_effect=RuntimeError("broken")):
            response = client.get("/api/status")

        assert response.status_code == 500
        assert json.loads(response.data)["success"] is False

    def test_parse_card(self, client):
        """Test parsing OCR lines."""
        response = client.post("/api/parse", json={
            "lines": ["Dr. Jane Doe", "Acme GmbH", "jane@acme.com", "+49 30 1234567", "www.acme.com"]
        })

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is True
        assert data["outcome"] == "complete"
        assert data["contact_data"]["name"] == "Dr. Jane Doe"
        assert data["contact_data"]["company"] == "Acme GmbH"
        assert data["qr_detected"] is False

    def test_parse_card_with_qr(self, client):
        """Test QR data overrides OCR data."""
        response = client.post("/api/parse", json={
            "lines": ["Dr. Jane Doe", "Info@Acme.com"],
            "qr_payload": VCARD
        })

        data = json.loads(response.data)
        assert data["contact_data"]["name"] == "Jane Doe"
        assert data["contact_data"]["email"] == "jane@acme.com"
        assert data["qr_kind"] == "vcard"

    def test_parse_nothing_recognized(self, client):
        """Test an empty result is a normal response."""
        response = client.post("/api/parse", json={"lines": ["???"]})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is False
        assert data["outcome"] == "empty"
        assert data["message"]

    def test_parse_no_data(self, client):
        """Test parse endpoint without a body."""
        response = client.post("/api/parse")

        assert response.status_code == 400
        assert json.loads(response.data)["success"] is False

    def test_parse_invalid_input(self, client):
        """Test parse endpoint input validation."""
        for body in ({"lines": "Jane Doe"}, {"lines": [1, 2]}, {"qr_payload": 42}, {"lines": []}):
            response = client.post("/api/parse", json=body)
            assert response.status_code == 400, f"Failed for: {body}"

    def test_parse_unexpected_error(self, client):
        """Test unexpected errors become a 500 JSON response."""
        mock_pipeline = Mock()
        mock_pipeline.process.side_effect = RuntimeError("boom")

        with patch("api.routes.get_pipeline", return_value=mock_pipeline):
            response = client.post("/api/parse", json={"lines": ["Jane Doe"]})

        assert response.status_code == 500
        data = json.loads(response.data)
        assert data["success"] is False
        assert "boom" not in data["error"]

    def test_parse_text(self, client):
        """Test parsing raw text."""
        response = client.post("/api/parse-text", json={"text": "Dr. Jane Doe\nAcme GmbH"})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["success"] is True
        assert data["data"]["contact_data"]["company"] == "Acme GmbH"

    def test_parse_text_missing(self, client):
        """Test parse-text without text."""
        response = client.post("/api/parse-text", json={})

        assert response.status_code == 400

    def test_parse_payload(self, client):
        """Test parsing a QR payload on its own."""
        response = client.post("/api/parse-payload", json={"payload": "https://www.acme.com"})

        data = json.loads(response.data)
        assert data["success"] is True
        assert data["data"]["kind"] == "url"
        assert data["data"]["contact"]["company"] == "Acme.com"

    def test_parse_payload_unknown(self, client):
        """Test an unknown payload format."""
        response = client.post("/api/parse-payload", json={"payload": "hello"})

        data = json.loads(response.data)
        assert response.status_code == 200
        assert data["success"] is False
        assert data["data"]["kind"] == "unknown"
        assert data["data"]["contact"] is None

    def test_merge(self, client):
        """Test merging two contacts."""
        response = client.post("/api/merge", json={
            "ocr": {"name": "Jane Doe", "phone": "+49 30 1234567"},
            "qr": {"email": "jane@acme.com"}
        })

        data = json.loads(response.data)["data"]
        assert data["contact"]["name"] == "Jane Doe"
        assert data["contact"]["email"] == "jane@acme.com"
        assert data["outcome"] == "partial"

    def test_merge_requires_ocr(self, client):
        """Test merge input validation."""
        response = client.post("/api/merge", json={"qr": {"name": "Jane"}})

        assert response.status_code == 400

    def test_fill_form(self, client):
        """Test filling and saving a form."""
        response = client.post("/api/form", json={
            "form": {"name": "Janet Doe"},
            "contact": {"name": "Jane Doe", "email": "Jane@Acme.com"},
            "url": "https://acme.com",
            "save": True
        })

        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["form"]["name"] == "Janet Doe"
        assert data["form"]["website"] == "https://acme.com"
        assert data["updated_fields"] == 2
        assert data["first_name"] == "Janet"
        assert data["last_name"] == "Doe"
        assert data["record"]["email"] == "jane@acme.com"

    def test_save_empty_form(self, client):
        """Test saving a form without contact data."""
        response = client.post("/api/form", json={"form": {"notes": "x"}, "save": True})

        assert response.status_code == 400
        data = json.loads(response.data)
        assert data["success"] is False
        assert data["error"]

    def test_batch(self, client):
        """Test batch processing."""
        response = client.post("/api/batch", json={"cards": [
            {"lines": ["Dr. Jane Doe", "jane@acme.com"]},
            {"text": "???"}
        ]})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["total"] == 2
        assert data["successful"] == 1

    def test_batch_too_large(self, client):
        """Test the batch size limit."""
        with patch.object(Config, "MAX_BATCH_SIZE", 1):
            response = client.post("/api/batch", json={"cards": [{"text": ""}, {"text": ""}]})

        assert response.status_code == 400

    def test_batch_invalid_cards(self, client):
        """Test batch input validation."""
        for body in ({}, {"cards": "x"}, {"cards": ["x"]}, {"cards": [{"lines": "x"}]}):
            response = client.post("/api/batch", json=body)
            assert response.status_code == 400, f"Failed for: {body}"

    def test_non_object_body(self, client):
        """Test a JSON array body is rejected on every POST endpoint."""
        for url in ("/api/parse", "/api/parse-text", "/api/parse-payload",
                    "/api/merge", "/api/form", "/api/batch"):
            response = client.post(url, json=["Jane Doe"])
            assert response.status_code == 400, f"Failed for: {url}"
            assert json.loads(response.data)["success"] is False

    def test_not_found(self, client):
        """Test unknown routes answer JSON."""
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert json.loads(response.data)["success"] is False


class TestConfig:
    """Test cases for configuration."""

    def test_get_config(self):
        """Test configuration lookup by name."""
        assert get_config("testing") is TestingConfig
        assert get_config("unknown") is DevelopmentConfig

    def test_default_settings_valid(self):
        """Test the shipped defaults pass validation."""
        assert Config.validate_settings() == []
        assert Config.get_extraction_settings()["max_batch_size"] == Config.MAX_BATCH_SIZE

    def test_invalid_settings_reported(self):
        """Test unknown regions and locales are reported."""
        with patch.object(Config, "PHONE_REGION", "ZZ"), patch.object(Config, "MOBILE_LOCALE", "XX"):
            problems = Config.validate_settings()

        assert len(problems) == 2
