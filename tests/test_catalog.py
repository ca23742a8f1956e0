"""
Tests for the network catalog builder and security classification.
"""

import pytest

from shared.config import CatalogConfig
from wifilens.analyzers.catalog import (
    CatalogBuilder,
    build_catalog,
    classify_security,
    deduplicate_by_ssid,
    filter_hidden_networks,
    filter_unsecured_networks,
    is_hidden,
)
from wifilens.core.models import SecurityLabel


class TestHiddenFilter:
    """Test removal of hidden and placeholder entries."""

    @pytest.mark.parametrize("ssid", ["", "   ", "<hidden>", "<UNKNOWN SSID>", "\x00\x00\x00"])
    def test_placeholders_are_hidden(self, make_network, ssid):
        assert is_hidden(make_network(ssid))

    def test_real_names_survive(self, make_network):
        networks = [make_network("Cafe"), make_network(""), make_network("<hidden>")]
        assert [n.ssid for n in filter_hidden_networks(networks)] == ["Cafe"]


class TestUnsecuredFilter:
    """Test removal of networks without security markers."""

    def test_open_and_unknown_are_dropped(self, make_network):
        networks = [
            make_network("Secure", capabilities="[WPA2-PSK-CCMP][ESS]"),
            make_network("Open", capabilities="[ESS]"),
            make_network("Unknown", capabilities=None),
            make_network("Legacy", capabilities="[WEP][ESS]"),
        ]
        assert [n.ssid for n in filter_unsecured_networks(networks)] == ["Secure", "Legacy"]

    def test_markers_are_case_insensitive(self, make_network):
        assert filter_unsecured_networks([make_network("x", capabilities="wpa2-psk")])


class TestDeduplication:
    """Test SSID deduplication."""

    def test_strongest_signal_wins(self, make_network):
        """Duplicate Cafe at -40 and -70 dBm keeps the -40 entry."""
        networks = [make_network("Cafe", level=-40), make_network("Cafe", level=-70)]
        result = deduplicate_by_ssid(networks)

        assert len(result) == 1
        assert result[0].signal_level_dbm == -40

    def test_first_seen_position_is_kept(self, make_network):
        networks = [
            make_network("Cafe", level=-70),
            make_network("Office", level=-50),
            make_network("Cafe", level=-40),
        ]
        result = deduplicate_by_ssid(networks)

        assert [n.ssid for n in result] == ["Cafe", "Office"]
        assert result[0].signal_level_dbm == -40

    def test_ties_keep_first_entry(self, make_network):
        networks = [
            make_network("Cafe", level=-50, bssid="aa:aa:aa:aa:aa:01"),
            make_network("Cafe", level=-50, bssid="aa:aa:aa:aa:aa:02"),
        ]
        assert deduplicate_by_ssid(networks)[0].bssid == "aa:aa:aa:aa:aa:01"

    def test_defined_level_beats_undefined(self, make_network):
        networks = [make_network("Cafe", level=None), make_network("Cafe", level=-85)]
        assert deduplicate_by_ssid(networks)[0].signal_level_dbm == -85

        networks = [make_network("Cafe", level=-85), make_network("Cafe", level=None)]
        assert deduplicate_by_ssid(networks)[0].signal_level_dbm == -85


class TestBuildCatalog:
    """Test the full filter-filter-dedupe pipeline."""

    def test_empty_input(self):
        assert build_catalog([]) == []

    def test_pipeline(self, make_network):
        raw = [
            make_network("HomeNet", level=-60),
            make_network("", level=-30),
            make_network("<hidden>", level=-35),
            make_network("FreeAirport", capabilities="[ESS]", level=-40),
            make_network("HomeNet", level=-45),
            make_network("Neighbour", level=-80),
        ]
        catalog = build_catalog(raw)

        assert [n.ssid for n in catalog] == ["HomeNet", "Neighbour"]
        assert catalog[0].signal_level_dbm == -45

    def test_no_hidden_entries_ever(self, make_network):
        raw = [make_network(s) for s in ["", " ", "<hidden>", "<unknown>", "Real"]]
        catalog = build_catalog(raw, drop_unsecured=False)

        assert all(n.ssid.strip() and n.ssid not in ("<hidden>", "<unknown>") for n in catalog)

    def test_builder_respects_config(self, make_network):
        raw = [make_network("Open", capabilities="[ESS]"), make_network("Secure")]

        assert len(CatalogBuilder().build(raw)) == 1
        assert len(CatalogBuilder(CatalogConfig(drop_unsecured=False)).build(raw)) == 2

    def test_custom_placeholder(self, make_network):
        config = CatalogConfig(hidden_placeholders=["(none)"])
        catalog = CatalogBuilder(config).build([make_network("(none)"), make_network("Real")])

        assert [n.ssid for n in catalog] == ["Real"]


class TestClassifySecurity:
    """Test display labels for capabilities strings."""

    @pytest.mark.parametrize(
        "capabilities,expected",
        [
            ("[WPA3-SAE-CCMP][ESS]", SecurityLabel.WPA3),
            ("[WPA2-PSK-CCMP][WPA3-SAE-CCMP]", SecurityLabel.WPA3),
            ("[WPA2-PSK-CCMP][ESS]", SecurityLabel.WPA2),
            ("[WPA-PSK-TKIP][ESS]", SecurityLabel.WPA),
            ("[WEP][ESS]", SecurityLabel.WEP),
            ("PSK", SecurityLabel.PSK),
            ("[EAP][ESS]", SecurityLabel.ENTERPRISE),
            ("[ESS]", SecurityLabel.UNSECURED),
            ("--", SecurityLabel.UNSECURED),
            ("", SecurityLabel.UNKNOWN),
            (None, SecurityLabel.UNKNOWN),
        ],
    )
    def test_labels(self, capabilities, expected):
        assert classify_security(capabilities) is expected
