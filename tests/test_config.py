"""Unit tests for configuration loading."""

import json

import pytest
from config import (
    Config,
    SimulationConfig,
    ServerConfig,
    LoggingConfig,
    load_config,
)


class TestSimulationConfig:
    """Tests for SimulationConfig class."""

    def test_default_values(self):
        """SimulationConfig has sensible defaults."""
        config = SimulationConfig()
        assert config.tick_interval == 0.5
        assert config.pattern == "glider"
        assert config.max_generations == 0
        assert config.print_header == "#Life 1.06"

    def test_custom_values(self):
        """SimulationConfig accepts custom values."""
        config = SimulationConfig(
            tick_interval=0.1,
            pattern="beacon",
            max_generations=100,
            print_header="#Life 1.06 custom",
        )
        assert config.tick_interval == 0.1
        assert config.pattern == "beacon"
        assert config.max_generations == 100
        assert config.print_header == "#Life 1.06 custom"


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_default_values(self):
        """ServerConfig has sensible defaults."""
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8080


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_default_values(self):
        """LoggingConfig has sensible defaults."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file == "logs/simulator.log"
        assert config.crash_file == "logs/crash.log"
        assert config.summary_every == 10


class TestConfig:
    """Tests for main Config class."""

    def test_default_config(self):
        """Config creates default sub-configs."""
        config = Config()
        assert isinstance(config.simulation, SimulationConfig)
        assert isinstance(config.server, ServerConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_from_dict(self):
        """Config.from_dict parses dictionary."""
        data = {
            "simulation": {"tick_interval": 0.2, "pattern": "toad"},
            "server": {"port": 9000},
            "logging": {"level": "DEBUG"}
        }
        config = Config.from_dict(data)
        assert config.simulation.tick_interval == 0.2
        assert config.simulation.pattern == "toad"
        assert config.server.port == 9000
        assert config.logging.level == "DEBUG"

    def test_from_dict_partial(self):
        """Config.from_dict handles partial data."""
        config = Config.from_dict({"simulation": {"max_generations": 5}})
        assert config.simulation.max_generations == 5
        assert config.simulation.pattern == "glider"
        assert config.server.port == 8080

    def test_from_dict_unknown_key(self):
        """Unknown keys are rejected rather than ignored."""
        with pytest.raises(TypeError):
            Config.from_dict({"simulation": {"rule": "B36/S23"}})


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_reads_file(self):
        """load_config reads the bundled config.json."""
        config = load_config()
        assert isinstance(config, Config)
        assert config.simulation.tick_interval == 0.25
        assert config.simulation.pattern == "glider"

    def test_load_config_custom_path(self, tmp_path):
        """load_config reads an explicit path."""
        path = tmp_path / "life.json"
        path.write_text(json.dumps({"simulation": {"pattern": "r-pentomino"}}))
        config = load_config(path)
        assert config.simulation.pattern == "r-pentomino"

    def test_load_config_missing_file(self, tmp_path):
        """load_config returns defaults for missing file."""
        config = load_config(tmp_path / "nonexistent.json")
        assert isinstance(config, Config)
        assert config.simulation.tick_interval == 0.5
