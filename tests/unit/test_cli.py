"""
Unit tests for the ``python -m mockstr`` entry point.

Tests:
- parse_args() defaults and repeatable --seed
- build_config() layering: YAML file, then command-line overrides
- load_seed_file() accepted and rejected shapes
- serve() seeding, readiness and signal-driven shutdown
- main() exit codes for configuration and bind failures
"""

import asyncio
import json
import signal
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from mockstr.__main__ import build_config, load_seed_file, main, parse_args, serve
from mockstr.core.config import MockstrConfig, ServerConfig
from mockstr.core.exceptions import ConfigurationError


# ============================================================================
# Arguments and configuration
# ============================================================================


class TestParseArgs:
    """Argument parsing."""

    def test_defaults(self):
        args = parse_args([])
        assert args.config is None
        assert args.seed == []
        assert args.host is None
        assert args.port is None
        assert args.debug is False
        assert args.latency is None
        assert args.log_level == "INFO"

    def test_seed_repeatable(self):
        args = parse_args(["--seed", "a.yaml", "b.json", "--seed", "c.yaml"])
        assert args.seed == [Path("a.yaml"), Path("b.json"), Path("c.yaml")]

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "TRACE"])

    @pytest.mark.parametrize("value", ["-1", "soon"])
    def test_invalid_latency(self, value):
        with pytest.raises(SystemExit):
            parse_args(["--latency", value])


class TestBuildConfig:
    """Config layering."""

    def test_without_file(self):
        config = build_config(parse_args(["--port", "0", "--debug"]))
        assert config.server.port == 0
        assert config.server.host == "127.0.0.1"
        assert config.simulator.debug is True

    def test_latency_override(self):
        config = build_config(parse_args(["--latency", "0.25"]))
        assert config.simulator.latency == 0.25

    def test_file_then_overrides(self, tmp_path):
        config_path = tmp_path / "mockstr.yaml"
        config_path.write_text(
            "server:\n  host: 0.0.0.0\n  port: 7100\nseed_files:\n  - seeds/repos.yaml\n"
        )
        config = build_config(
            parse_args(["--config", str(config_path), "--port", "7200", "--seed", "/abs.json"])
        )
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 7200
        assert config.seed_files == [tmp_path / "seeds" / "repos.yaml", Path("/abs.json")]

    def test_invalid_file(self, tmp_path):
        config_path = tmp_path / "mockstr.yaml"
        config_path.write_text("server:\n  port: 70000\n")
        with pytest.raises(ConfigurationError):
            build_config(parse_args(["--config", str(config_path)]))


class TestLoadSeedFile:
    """Seed file shapes."""

    def test_yaml_list(self, tmp_path, event_dict):
        path = tmp_path / "seed.yaml"
        path.write_text(json.dumps([event_dict]))
        assert load_seed_file(path) == [event_dict]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("")
        assert load_seed_file(path) == []

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("kind: 1\n")
        with pytest.raises(ConfigurationError, match="list of event objects"):
            load_seed_file(path)

    def test_list_of_scalars(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="list of event objects"):
            load_seed_file(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "seed.yaml"
        path.write_text("- [unclosed\n")
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_seed_file(path)

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_seed_file(tmp_path / "absent.yaml")


# ============================================================================
# Serving
# ============================================================================


class TestServe:
    """serve() lifecycle."""

    async def test_runs_until_signal(self, tmp_path, event_dict, caplog):
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps([event_dict]))
        config = MockstrConfig(server=ServerConfig(port=0), seed_files=[seed])

        handlers = {}

        def capture(sig, callback, *args):
            handlers[sig] = (callback, args)

        loop = asyncio.get_running_loop()
        with (
            patch.object(loop, "add_signal_handler", capture),
            caplog.at_level("INFO", logger="cli"),
        ):
            task = asyncio.create_task(serve(config))
            for _ in range(100):
                if "relay_ready" in [r.getMessage() for r in caplog.records]:
                    break
                await asyncio.sleep(0.01)

            assert set(handlers) == {signal.SIGINT, signal.SIGTERM}
            callback, args = handlers[signal.SIGTERM]
            callback(*args)
            assert await asyncio.wait_for(task, timeout=5) == 0

        messages = [r.getMessage() for r in caplog.records]
        assert "seed_file_loaded" in messages
        assert "relay_ready" in messages
        assert "shutdown_signal" in messages

    async def test_bad_seed_event(self, tmp_path, event_dict):
        event_dict["kind"] = "issue"
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps([event_dict]))
        config = MockstrConfig(server=ServerConfig(port=0), seed_files=[seed])
        with pytest.raises(ConfigurationError, match="invalid event in seed file"):
            await serve(config)


class TestMain:
    """Exit codes."""

    @pytest.fixture(autouse=True)
    def no_logging_setup(self):
        with patch("mockstr.__main__.setup_logging"):
            yield

    async def test_missing_config(self, tmp_path):
        assert await main(["--config", str(tmp_path / "absent.yaml")]) == 1

    async def test_bind_failure(self):
        with patch("mockstr.__main__.serve", AsyncMock(side_effect=OSError("address in use"))):
            assert await main(["--port", "7000"]) == 1

    async def test_success(self):
        with patch("mockstr.__main__.serve", AsyncMock(return_value=0)) as serve_mock:
            assert await main(["--port", "0"]) == 0
        [config] = serve_mock.await_args.args
        assert config.server.port == 0
