"""
Unit tests for the 'init' command.
"""

import yaml

from flatc4.cli.commands.initialize import init


class TestInitCommand:
    """Test the init command."""

    def test_init_creates_config(self, runner, isolated_cwd):
        result = runner.invoke(init)

        assert result.exit_code == 0
        assert "Initialized successfully" in result.output

        config_path = isolated_cwd / ".flatc4/config.yaml"
        with open(config_path) as f:
            config = yaml.safe_load(f)
        assert config["storage"]["key"] == "flat-c4-storage"
        assert config["labels"]["code"] == "Code"

    def test_init_keeps_existing_config(self, runner, isolated_cwd):
        config_path = isolated_cwd / ".flatc4/config.yaml"
        config_path.parent.mkdir()
        config_path.write_text("storage:\n  key: mine\n")

        result = runner.invoke(init)

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert "mine" in config_path.read_text()

    def test_init_force_overwrites(self, runner, isolated_cwd):
        config_path = isolated_cwd / ".flatc4/config.yaml"
        config_path.parent.mkdir()
        config_path.write_text("storage:\n  key: mine\n")

        result = runner.invoke(init, ["--force"])

        assert result.exit_code == 0
        assert "flat-c4-storage" in config_path.read_text()
