"""
Tests for FieldExtractor class.

Tests email and phone scanning on single OCR lines.
"""

import pytest
from unittest.mock import patch

from card_fusion.extractors import FieldExtractor


class TestEmailExtraction:
    """Test cases for email extraction."""

    @pytest.fixture
    def extractor(self):
        """Create extractor instance."""
        return FieldExtractor()

    def test_extract_email(self, extractor):
        """Test email extraction is lower-cased and trimmed."""
        test_cases = [
            ("John@Example.COM", "john@example.com"),
            ("E-Mail: jane.doe@acme.com ", "jane.doe@acme.com"),
            ("user.name+tag@domain.co.uk", "user.name+tag@domain.co.uk"),
            ("No email here", None),
            ("", None),
        ]

        for text, expected in test_cases:
            result = extractor.extract_email(text)
            assert result == expected, f"Failed for: {text}"

    def test_extract_mailto_link(self, extractor):
        """Test mailto links with percent-encoded characters."""
        assert extractor.extract_email("mailto:Jane%40Acme.com") == "jane@acme.com"

    def test_extract_emails_deduplicates(self, extractor):
        """Test the same address in different case is reported once."""
        emails = extractor.extract_emails("info@acme.com / INFO@ACME.COM / sales@acme.com")

        assert emails == ["info@acme.com", "sales@acme.com"]


class TestPhoneExtraction:
    """Test cases for phone extraction."""

    @pytest.fixture
    def extractor(self):
        """Create extractor instance."""
        return FieldExtractor()

    def test_extract_international_number(self, extractor):
        """Test the matched substring is returned as printed."""
        phones = extractor.extract_phones("Tel: +49 30 1234567")

        assert "+49 30 1234567" in phones

    def test_short_numbers_rejected(self, extractor):
        """Test numbers with fewer than 8 digits are dropped."""
        assert extractor.extract_phones("Tel: 12345") == []
        assert extractor.extract_phones("Jane Doe") == []

    def test_fallback_patterns(self, extractor):
        """Test regex fallbacks when the matcher finds nothing."""
        with patch("card_fusion.extractors.phonenumbers.PhoneNumberMatcher", return_value=[]):
            assert extractor.extract_phones("Fon: 030/1234567") == ["030/1234567"]
            assert extractor.extract_phones("+49 151 2345678") == ["+49 151 2345678"]
            assert extractor.extract_phones("(030) 1234567") == ["(030) 1234567"]

    def test_fallback_respects_minimum_digits(self, extractor):
        """Test fallback matches are held to the same digit minimum."""
        with patch("card_fusion.extractors.phonenumbers.PhoneNumberMatcher", return_value=[]):
            assert extractor.extract_phones("Room 0301") == []

    def test_identifier_lines_rejected(self, extractor):
        """Test bank, tax and register numbers are not phone numbers."""
        test_cases = [
            "IBAN DE89 3704 0044 0532 0130 00",
            "USt-IdNr.: DE123456789",
            "HRB 12345678 Amtsgericht",
            "Steuernummer: 12/345/67890",
        ]

        for text in test_cases:
            assert extractor.extract_phones(text) == [], f"Failed for: {text}"
            assert extractor.is_identifier(text), f"Failed for: {text}"

    def test_date_not_a_phone(self, extractor):
        """Test dates and times are not phone numbers."""
        assert extractor.extract_phones("12.03.2024 10:30") == []

    def test_mobile_found_without_patching(self, extractor):
        """Test a short mobile number rejected by validation is still found."""
        assert extractor.extract_phones("Mobil: +49 151 2345678") == ["+49 151 2345678"]

    def test_company_names_not_identifiers(self, extractor):
        """Test tax advisory firms are not mistaken for identifier lines."""
        assert not extractor.is_identifier("Steuerberatung Müller GmbH")
        assert not extractor.is_identifier("Tax Consulting GmbH")

    def test_is_mobile(self, extractor):
        """Test German mobile prefixes."""
        assert extractor.is_mobile("+49 151 2345678")
        assert extractor.is_mobile("0171 2345678")
        assert not extractor.is_mobile("+49 30 1234567")
        assert not extractor.is_mobile("030 1234567")

    def test_select_best_phone_prefers_mobile(self, extractor):
        """Test the mobile number wins regardless of order."""
        phones = ["+49 30 1234567", "+49 151 2345678"]

        assert extractor.select_best_phone(phones) == "+49 151 2345678"
        assert extractor.select_best_phone(reversed(phones)) == "+49 151 2345678"

    def test_select_best_phone_without_mobile(self, extractor):
        """Test the first number is used when none is mobile."""
        assert extractor.select_best_phone(["030 1234567", "040 7654321"]) == "030 1234567"
        assert extractor.select_best_phone([]) is None

    def test_unknown_locale_falls_back(self):
        """Test an unknown mobile locale uses the default prefix table."""
        extractor = FieldExtractor(mobile_locale="XX")

        assert extractor.mobile_prefixes == ("491", "01")


class TestLineTypes:
    """Test cases for website and address detection."""

    @pytest.fixture
    def extractor(self):
        """Create extractor instance."""
        return FieldExtractor()

    def test_is_website(self, extractor):
        """Test website detection."""
        assert extractor.is_website("www.acme.com")
        assert extractor.is_website("https://acme.io")
        assert extractor.is_website("acme.de/kontakt")
        assert not extractor.is_website("Dr. Jane Doe")

    def test_is_address(self, extractor):
        """Test street and postal code detection."""
        assert extractor.is_address("Hauptstraße 5")
        assert extractor.is_address("10115 Berlin")
        assert extractor.is_address("PO Box 42")
        assert not extractor.is_address("Jane Doe")
