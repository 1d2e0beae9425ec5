"""
Tests for the language-model response adapter.
"""

from card_fusion.assistant import candidate_from_fields, parse_assistant_response, parse_response


class TestAssistantAdapter:
    """Test cases for parsing model replies."""

    def test_parse_plain_json(self):
        """Test a plain JSON reply."""
        reply = ('{"name": "Jane Doe", "company": "Acme GmbH", "email": "Jane@Acme.com", '
                 '"phone": "+49 30 1234567", "job_title": "CEO", "website": "acme.com"}')

        contact = parse_assistant_response(reply)

        assert contact.name == "Jane Doe"
        assert contact.company == "Acme GmbH"
        assert contact.email == "jane@acme.com"
        assert contact.title == "CEO"
        assert contact.website_or_url == "acme.com"

    def test_parse_markdown_block(self):
        """Test JSON wrapped in a markdown code block."""
        reply = 'Here you go:\n```json\n{"name": "Jane Doe"}\n```'

        assert parse_assistant_response(reply).name == "Jane Doe"

    def test_parse_embedded_object(self):
        """Test a JSON object surrounded by prose."""
        reply = 'Sure! {"company": "Acme GmbH"} Hope this helps.'

        assert parse_response(reply) == {"company": "Acme GmbH"}

    def test_unparseable_reply(self):
        """Test garbage yields an empty candidate."""
        assert parse_response("no json here") == {}
        assert parse_response('["not", "an", "object"]') == {}
        assert parse_assistant_response("no json here").has_data is False
        assert parse_assistant_response(None).has_data is False

    def test_mapping_input(self):
        """Test an already decoded reply; non-string values are ignored."""
        contact = parse_assistant_response({"name": 42, "phone": None, "company": "Acme GmbH"})

        assert contact.name is None
        assert contact.phone is None
        assert contact.company == "Acme GmbH"

    def test_job_title_preferred_over_title(self):
        """Test 'job_title' wins over 'title' when both are present."""
        contact = candidate_from_fields({"title": "Dr.", "job_title": "CTO"})

        assert contact.title == "CTO"
