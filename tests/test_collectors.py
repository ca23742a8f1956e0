"""
Tests for the collaborator adapters: nmcli, scan dumps and recognized text.
"""

import asyncio
import sys

import pytest

from shared.config import ResolverConfig, WifiLensConfig
from wifilens.collectors import nmcli
from wifilens.collectors.nmcli import (
    NmcliConnector,
    NmcliScanner,
    parse_scan_output,
    percent_to_dbm,
    split_terse,
)
from wifilens.collectors.recognized_text import RecognizedTextOCR
from wifilens.collectors.scan_file import ScanFileError, ScanFileReader, parse_scan_document
from wifilens.core.engine import ResolutionEngine
from wifilens.core.models import FailureKind


NMCLI_OUTPUT = (
    "*:HomeNet:AA\\:BB\\:CC\\:DD\\:EE\\:01:2437 MHz:70:WPA2\n"
    " :Cafe\\:Bar:AA\\:BB\\:CC\\:DD\\:EE\\:02:5180 MHz:40:WPA1 WPA2\n"
    " :Lobby:AA\\:BB\\:CC\\:DD\\:EE\\:03:2412 MHz:90:\n"
    "\n"
)


def _fake_run(code, stdout="", stderr="", calls=None):
    async def run(argv):
        if calls is not None:
            calls.append(argv)
        return code, stdout, stderr

    return run


class TestTerseParsing:
    """Test nmcli terse output parsing."""

    def test_split_on_unescaped_colons(self):
        assert split_terse("a:b\\:c:d") == ["a", "b:c", "d"]

    def test_escaped_backslash(self):
        assert split_terse("a\\\\:b") == ["a\\", "b"]

    @pytest.mark.parametrize("percent,dbm", [(100, -50), (70, -65), (40, -80), (0, -100), (150, -50)])
    def test_percent_to_dbm(self, percent, dbm):
        assert percent_to_dbm(percent) == dbm

    def test_parse_scan_output(self):
        networks = parse_scan_output(NMCLI_OUTPUT)

        assert [n.ssid for n in networks] == ["HomeNet", "Cafe:Bar", "Lobby"]
        assert networks[0].bssid == "AA:BB:CC:DD:EE:01"
        assert networks[0].frequency_mhz == 2437
        assert networks[0].signal_level_dbm == -65
        assert networks[1].capabilities == "WPA1 WPA2"
        assert networks[2].capabilities == "--"

    def test_active_only(self):
        networks = parse_scan_output(NMCLI_OUTPUT, active_only=True)
        assert [n.ssid for n in networks] == ["HomeNet"]

    def test_short_lines_are_skipped(self):
        assert parse_scan_output("garbage\n*:only:three") == []


class TestNmcliScanner:
    """Test the nmcli-backed scanner."""

    def test_command(self):
        assert NmcliScanner("wlan0").command() == [
            "nmcli", "-t", "-f", "IN-USE,SSID,BSSID,FREQ,SIGNAL,SECURITY",
            "device", "wifi", "list", "ifname", "wlan0", "--rescan", "yes",
        ]

    def test_scan(self, monkeypatch):
        calls = []
        monkeypatch.setattr(nmcli, "_run", _fake_run(0, NMCLI_OUTPUT, calls=calls))

        networks = asyncio.run(NmcliScanner(rescan=False).scan())

        assert len(networks) == 3
        assert calls[0][-2:] == ["--rescan", "no"]

    def test_scan_failure_raises(self, monkeypatch):
        monkeypatch.setattr(nmcli, "_run", _fake_run(8, stderr="Error: NetworkManager is not running."))

        with pytest.raises(RuntimeError):
            asyncio.run(NmcliScanner().scan())


class TestNmcliConnector:
    """Test the nmcli-backed connector."""

    def test_wpa_command(self):
        assert NmcliConnector().command("Home", "pw", True) == [
            "nmcli", "device", "wifi", "connect", "Home", "password", "pw",
        ]

    def test_wep_command(self):
        argv = NmcliConnector("wlan0").command("Old", "abcde", False)
        assert argv[-4:] == ["wep-key-type", "key", "ifname", "wlan0"]

    def test_open_network_has_no_password(self):
        assert "password" not in NmcliConnector().command("Lobby", "", True)

    def test_connect_success(self, monkeypatch):
        monkeypatch.setattr(nmcli, "_run", _fake_run(0, "Device 'wlan0' successfully activated"))
        assert asyncio.run(NmcliConnector().connect("Home", "pw", True)) is True

    def test_connect_refused(self, monkeypatch):
        monkeypatch.setattr(nmcli, "_run", _fake_run(4, stderr="Error: Secrets were required"))
        assert asyncio.run(NmcliConnector().connect("Home", "bad", True)) is False


@pytest.fixture
def slow_nmcli(tmp_path) -> str:
    """An nmcli stand-in that hangs well past any test timeout."""
    script = tmp_path / "nmcli"
    script.write_text("#!/bin/sh\nexec sleep 30\n", encoding="utf-8")
    script.chmod(0o755)
    return str(script)


@pytest.fixture
def spawned(monkeypatch) -> list:
    """Records every process started through asyncio."""
    processes = []
    create = asyncio.create_subprocess_exec

    async def spawn(*args, **kwargs):
        process = await create(*args, **kwargs)
        processes.append(process)
        return process

    monkeypatch.setattr(asyncio, "create_subprocess_exec", spawn)
    return processes


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
class TestNmcliProcessLifecycle:
    """Test that timed-out nmcli calls do not leave processes behind."""

    def test_timed_out_scan_kills_child(self, slow_nmcli, spawned):
        async def scan():
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(NmcliScanner(binary=slow_nmcli).scan(), 0.3)

        asyncio.run(scan())

        assert len(spawned) == 1
        assert spawned[0].returncode is not None

    def test_timed_out_connect_kills_child(self, slow_nmcli, spawned):
        async def connect():
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(
                    NmcliConnector(binary=slow_nmcli).connect("Home", "pw", True), 0.3
                )

        asyncio.run(connect())

        assert spawned[0].returncode is not None

    def test_engine_timeout_reaps_scanner(self, slow_nmcli, spawned):
        """The engine reports a collaborator failure and nothing keeps running."""
        config = WifiLensConfig(resolver=ResolverConfig(collaborator_timeout=0.3))
        engine = ResolutionEngine(scanner=NmcliScanner(binary=slow_nmcli), config=config)

        outcome = asyncio.run(engine.resolve_qr("WIFI:S:HomeNet;T:WPA;P:secret123;;"))

        assert outcome.warnings == [FailureKind.COLLABORATOR_FAILURE]
        assert all(process.returncode is not None for process in spawned)


class TestScanFile:
    """Test JSON scan dump replay."""

    def test_list_layout(self, scan_dump, sample_scan_document):
        networks = asyncio.run(ScanFileReader(scan_dump(sample_scan_document)).scan())

        assert len(networks) == 5
        assert networks[0].ssid == "HomeNet"
        assert networks[0].signal_level_dbm == -55
        assert networks[4].capabilities == "[WPA3-SAE-CCMP]"

    def test_networks_object_layout(self, scan_dump, sample_scan_document):
        path = scan_dump({"networks": sample_scan_document})
        assert len(ScanFileReader(path).load()) == 5

    def test_invalid_entries_are_skipped(self):
        networks = parse_scan_document([{"SSID": "Good", "level": -40}, {"SSID": "Bad", "level": "strong"}])
        assert [n.ssid for n in networks] == ["Good"]

    def test_unsupported_layout(self):
        with pytest.raises(ScanFileError):
            parse_scan_document({"results": []})

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ScanFileError):
            ScanFileReader(path).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScanFileReader(tmp_path / "absent.json").load()


class TestRecognizedTextOCR:
    """Test the pre-recognized text source."""

    def test_returns_text_per_script(self):
        ocr = RecognizedTextOCR({"latin": "SSID: A", "chinese": "网络: B"})

        assert ocr.scripts == ["latin", "chinese"]
        assert asyncio.run(ocr.recognize("img", "chinese")) == "网络: B"

    def test_unknown_script_raises(self):
        with pytest.raises(LookupError):
            asyncio.run(RecognizedTextOCR({}).recognize("img", "korean"))
