"""Tests for the Tap facade, public entry points, config and CLI."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from mctap import __main__ as cli
from mctap.config import TapConfig
from mctap.discovery.resolver import AddressResolver, ServerLocation
from mctap.errors import ProbeTimeout, ResolutionFailure
from mctap.status.probe import ServerInfo, StatusProbe
from mctap.tap import Tap, get_server_information, get_server_information_from_dns

INFO = ServerInfo("play.example.net", 12, "Welcome", "1.8.9")
LOCATION = ServerLocation("play.example.net", 25577)


# ------------------------------------------------------------------ #
# Tap facade
# ------------------------------------------------------------------ #

class TestTap:
    @pytest.mark.asyncio
    async def test_fetch_resolves_then_probes(self):
        resolver = AddressResolver()
        resolver.resolve = AsyncMock(return_value=LOCATION)
        probe = AsyncMock(return_value=INFO)

        with patch.object(StatusProbe, "probe", probe):
            info = await Tap("mc.example.net", 3.0, resolver=resolver).fetch_server_info()

        assert info == INFO
        resolver.resolve.assert_awaited_once_with("mc.example.net", 3.0)
        probe.assert_awaited_once_with(LOCATION)

    @pytest.mark.asyncio
    async def test_resolution_error_propagates(self):
        resolver = AddressResolver()
        resolver.resolve = AsyncMock(side_effect=ResolutionFailure("Cannot resolve x"))
        probe = AsyncMock()

        with patch.object(StatusProbe, "probe", probe):
            with pytest.raises(ResolutionFailure):
                await Tap("x", resolver=resolver).fetch_server_info()

        probe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_probe_uses_io_timeout(self):
        seen = []

        async def _probe(self_, location):
            seen.append((self_.timeout, self_.read_size, location))
            return INFO

        config = TapConfig(resolve_timeout=1.0, io_timeout=2.5, read_size=512)
        with patch.object(StatusProbe, "probe", _probe):
            await Tap("mc.example.net", config=config).probe(LOCATION)

        assert seen == [(2.5, 512, LOCATION)]

    def test_timeout_applies_to_both_phases(self):
        tap = Tap("mc.example.net", 7.0)
        assert tap.config.resolve_timeout == 7.0
        assert tap.config.io_timeout == 7.0

    def test_config_settings_reach_resolver(self):
        config = TapConfig(default_port=25570, srv_service="_mc._tcp", nameservers=["192.0.2.53"])
        tap = Tap("mc.example.net", config=config)
        assert tap.resolver.default_port == 25570
        assert tap.resolver.srv_service == "_mc._tcp"
        assert [str(ns) for ns in tap.resolver.resolver.nameservers] == ["192.0.2.53"]


# ------------------------------------------------------------------ #
# Module-level entry points
# ------------------------------------------------------------------ #

class TestEntryPoints:
    @pytest.mark.asyncio
    async def test_get_server_information_defaults_port(self):
        probe = AsyncMock(return_value=INFO)
        with patch.object(StatusProbe, "probe", probe):
            assert await get_server_information("play.example.net") == INFO
        probe.assert_awaited_once_with(ServerLocation("play.example.net", 25565))

    @pytest.mark.asyncio
    async def test_get_server_information_explicit_port(self):
        probe = AsyncMock(return_value=INFO)
        with patch.object(StatusProbe, "probe", probe):
            await get_server_information("10.0.0.5", 25570)
        probe.assert_awaited_once_with(ServerLocation("10.0.0.5", 25570))

    @pytest.mark.asyncio
    async def test_get_server_information_from_dns(self):
        resolve = AsyncMock(return_value=LOCATION)
        probe = AsyncMock(return_value=INFO)
        with patch.object(AddressResolver, "resolve", resolve), \
                patch.object(StatusProbe, "probe", probe):
            info = await get_server_information_from_dns("mc.example.net", timeout=4.0)

        assert info == INFO
        resolve.assert_awaited_once_with("mc.example.net", 4.0)
        probe.assert_awaited_once_with(LOCATION)


# ------------------------------------------------------------------ #
# Config
# ------------------------------------------------------------------ #

class TestConfig:
    def test_defaults(self):
        config = TapConfig()
        assert config.resolve_timeout == 5.0
        assert config.io_timeout == 5.0
        assert config.default_port == 25565
        assert config.srv_service == "_minecraft._tcp"
        assert config.nameservers == []

    def test_load_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / "mctap.json"
        path.write_text(json.dumps({"io_timeout": 1.5, "colour": "blue"}))
        config = TapConfig.load(path)
        assert config.io_timeout == 1.5
        assert not hasattr(config, "colour")

    def test_load_missing_file(self, tmp_path):
        assert TapConfig.load(tmp_path / "absent.json") == TapConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MCTAP_RESOLVE_TIMEOUT", "2")
        monkeypatch.setenv("MCTAP_IO_TIMEOUT", "3.5")
        monkeypatch.setenv("MCTAP_DEFAULT_PORT", "25570")
        monkeypatch.setenv("MCTAP_NAMESERVERS", "192.0.2.1, 192.0.2.2")
        config = TapConfig.from_env()
        assert config.resolve_timeout == 2.0
        assert config.io_timeout == 3.5
        assert config.default_port == 25570
        assert config.nameservers == ["192.0.2.1", "192.0.2.2"]

    def test_build_resolver_with_nameservers(self):
        resolver = TapConfig(resolve_timeout=2.0, nameservers=["192.0.2.1"]).build_resolver()
        assert [str(ns) for ns in resolver.nameservers] == ["192.0.2.1"]
        assert resolver.lifetime == 2.0


# ------------------------------------------------------------------ #
# CLI
# ------------------------------------------------------------------ #

class TestCli:
    def test_prints_status(self, capsys):
        with patch.object(Tap, "fetch_server_info", AsyncMock(return_value=INFO)):
            assert cli.main(["mc.example.net"]) == 0

        out = capsys.readouterr().out
        assert "Name: play.example.net" in out
        assert "Player count: 12" in out
        assert "MOTD: Welcome" in out
        assert "Supported versions: 1.8.9" in out

    def test_port_bypasses_resolution(self, capsys):
        fetch = AsyncMock()
        probe = AsyncMock(return_value=INFO)
        with patch.object(Tap, "fetch_server_info", fetch), patch.object(Tap, "probe", probe):
            assert cli.main(["10.0.0.5", "--port", "25570"]) == 0

        fetch.assert_not_awaited()
        probe.assert_awaited_once_with(ServerLocation("10.0.0.5", 25570))

    def test_error_exit_code(self, capsys):
        error = ProbeTimeout("Timed out waiting for status from mc.example.net:25565")
        with patch.object(Tap, "fetch_server_info", AsyncMock(side_effect=error)):
            assert cli.main(["mc.example.net"]) == 1

        assert "Error: Timed out waiting" in capsys.readouterr().err

    def test_timeout_flag(self):
        seen = []

        async def _fetch(self_):
            seen.append((self_.config.resolve_timeout, self_.config.io_timeout))
            return INFO

        with patch.object(Tap, "fetch_server_info", _fetch):
            cli.main(["mc.example.net", "--timeout", "1.5"])

        assert seen == [(1.5, 1.5)]

    def test_nan_player_count(self):
        text = cli.format_info(ServerInfo("h", None, None, None))
        assert "Player count: NaN" in text
