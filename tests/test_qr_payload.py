"""
Tests for the WiFi QR payload codec.
"""

import pytest

from wifilens.core.models import FailureKind, ParseFailure, SecurityKind, WiFiCredentials
from wifilens.extractors.qr_payload import (
    build_qr_payload,
    escape_value,
    parse_qr_payload,
    parse_security,
    split_fields,
)


class TestParseQrPayload:
    """Test parsing of decoded QR text."""

    def test_standard_payload(self):
        """A complete payload yields all three fields."""
        result = parse_qr_payload("WIFI:S:HomeNet;T:WPA;P:secret123;;")

        assert isinstance(result, WiFiCredentials)
        assert result.ssid == "HomeNet"
        assert result.password == "secret123"
        assert result.security is SecurityKind.WPA
        assert result.hidden is False

    def test_field_order_does_not_matter(self):
        """Fields are matched by tag, not position."""
        result = parse_qr_payload("WIFI:T:WEP;P:abc12;S:OldRouter;;")

        assert result.ssid == "OldRouter"
        assert result.password == "abc12"
        assert result.security is SecurityKind.WEP

    def test_missing_type_defaults_to_wpa(self):
        """An omitted T: field is read as WPA."""
        result = parse_qr_payload("WIFI:S:Net;P:pw;;")
        assert result.security is SecurityKind.WPA

    def test_missing_password_is_empty(self):
        """An omitted P: field yields an empty password."""
        result = parse_qr_payload("WIFI:S:Lobby;T:nopass;;")

        assert result.password == ""
        assert result.security is SecurityKind.OPEN

    def test_hidden_flag(self):
        """H:true marks the network as hidden."""
        result = parse_qr_payload("WIFI:S:Stealth;T:WPA;P:pw;H:true;;")
        assert result.hidden is True

    def test_password_may_contain_colon(self):
        """Only the first colon separates tag and value."""
        result = parse_qr_payload("WIFI:S:Net;T:WPA;P:a:b:c;;")
        assert result.password == "a:b:c"

    def test_first_duplicate_field_wins(self):
        """A repeated tag keeps its first value."""
        result = parse_qr_payload("WIFI:S:First;S:Second;P:pw;;")
        assert result.ssid == "First"

    def test_escaped_delimiters(self):
        """Backslash escapes are honoured by default."""
        result = parse_qr_payload(r"WIFI:S:Cafe\;Bar;T:WPA;P:pa\:ss\\word;;")

        assert result.ssid == "Cafe;Bar"
        assert result.password == "pa:ss\\word"

    def test_legacy_mode_keeps_backslashes(self):
        """Without unescaping every semicolon ends a field."""
        result = parse_qr_payload(r"WIFI:S:Cafe\;Bar;T:WPA;P:x;;", unescape=False)
        assert result.ssid == "Cafe\\"

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "hello world",
            "wifi:S:lower;;",
            "MECARD:N:Someone;;",
            "https://example.com/WIFI:S:Net;;",
        ],
    )
    def test_non_wifi_text_is_rejected(self, payload):
        """Text not starting with WIFI: is a malformed payload."""
        result = parse_qr_payload(payload)

        assert isinstance(result, ParseFailure)
        assert result.kind is FailureKind.MALFORMED_PAYLOAD

    @pytest.mark.parametrize("payload", [None, 42, b"WIFI:S:Net;;", ["WIFI:S:Net;;"]])
    def test_non_text_input_is_rejected(self, payload):
        """Non-string input never raises."""
        assert isinstance(parse_qr_payload(payload), ParseFailure)

    @pytest.mark.parametrize(
        "payload",
        ["WIFI:T:WPA;P:secret;;", "WIFI:S:;T:WPA;P:secret;;", "WIFI:;;"],
    )
    def test_missing_or_empty_ssid_is_rejected(self, payload):
        """A payload without a network name is malformed."""
        result = parse_qr_payload(payload)

        assert isinstance(result, ParseFailure)
        assert "SSID" in result.reason


class TestSecurityTokens:
    """Test T: token mapping."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("WPA", SecurityKind.WPA),
            ("wpa2", SecurityKind.WPA),
            ("SAE", SecurityKind.WPA),
            ("WEP", SecurityKind.WEP),
            ("nopass", SecurityKind.OPEN),
            ("", SecurityKind.WPA),
            (None, SecurityKind.WPA),
            ("bogus", SecurityKind.WPA),
        ],
    )
    def test_parse_security(self, token, expected):
        assert parse_security(token) is expected


class TestSplitFields:
    """Test raw field splitting."""

    def test_escaped_semicolon_stays_in_field(self):
        assert split_fields(r"S:a\;b;P:c;;") == ["S:a;b", "P:c"]

    def test_legacy_split(self):
        assert split_fields(r"S:a\;b;P:c;;", unescape=False) == ["S:a\\", "b", "P:c"]


class TestBuildQrPayload:
    """Test payload generation for sharing."""

    def test_wpa_payload(self):
        creds = WiFiCredentials(ssid="HomeNet", password="secret123")
        assert build_qr_payload(creds) == "WIFI:S:HomeNet;T:WPA;P:secret123;;"

    def test_open_network(self):
        creds = WiFiCredentials(ssid="Lobby", security=SecurityKind.OPEN)
        assert build_qr_payload(creds) == "WIFI:S:Lobby;T:nopass;P:;;"

    def test_hidden_network(self):
        creds = WiFiCredentials(ssid="Stealth", password="pw", hidden=True)
        assert build_qr_payload(creds) == "WIFI:S:Stealth;T:WPA;P:pw;H:true;;"

    def test_special_characters_are_escaped(self):
        """Delimiters in values are escaped and survive a parse."""
        creds = WiFiCredentials(ssid="Cafe;Bar", password=r"a:b,c\d", security=SecurityKind.WEP)
        payload = build_qr_payload(creds)

        assert payload == r"WIFI:S:Cafe\;Bar;T:WEP;P:a\:b\,c\\d;;"
        assert parse_qr_payload(payload) == creds

    def test_escape_value(self):
        assert escape_value("plain") == "plain"
        assert escape_value("a;b") == "a\\;b"
