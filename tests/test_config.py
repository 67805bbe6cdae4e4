"""Tests for resolver configuration."""

from msbuild_refs.config import (
    DEFAULT_ITEM_KINDS,
    ResolverConfig,
    configure,
    get_config,
    reset_config,
)


class TestResolverConfig:
    """Tests for ResolverConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = ResolverConfig()
        assert config.configuration == "Debug"
        assert config.dotnet_path == "dotnet"
        assert config.build_project_references is False
        assert config.item_kinds == DEFAULT_ITEM_KINDS
        assert "MSBUILD_REFS_CONFIGURATION" in config.configuration_env_vars

    def test_from_env(self):
        """Test values are read from the environment."""
        config = ResolverConfig.from_env(
            {"MSBUILD_REFS_CONFIGURATION": "Release", "MSBUILD_REFS_DOTNET": "/opt/dotnet/dotnet"}
        )
        assert config.configuration == "Release"
        assert config.dotnet_path == "/opt/dotnet/dotnet"

    def test_from_env_dotnet_host_path_fallback(self):
        """Test DOTNET_HOST_PATH is used when no explicit dotnet is set."""
        config = ResolverConfig.from_env({"DOTNET_HOST_PATH": "/usr/share/dotnet/dotnet"})
        assert config.dotnet_path == "/usr/share/dotnet/dotnet"

    def test_from_env_ignores_empty_values(self):
        """Test empty variables leave defaults in place."""
        config = ResolverConfig.from_env({"MSBUILD_REFS_CONFIGURATION": ""})
        assert config.configuration == "Debug"


class TestProcessConfig:
    """Tests for the process-wide config."""

    def test_get_config_reads_environment(self, monkeypatch):
        """Test the first lookup reads the environment."""
        monkeypatch.setenv("MSBUILD_REFS_CONFIGURATION", "Signed")

        assert get_config().configuration == "Signed"

    def test_get_config_is_cached(self, monkeypatch):
        """Test the config is fixed after the first lookup."""
        first = get_config()
        monkeypatch.setenv("MSBUILD_REFS_CONFIGURATION", "Release")

        assert get_config() is first
        assert get_config().configuration == "Debug"

    def test_configure_overrides_environment(self, monkeypatch):
        """Test explicit arguments win over environment values."""
        monkeypatch.setenv("MSBUILD_REFS_CONFIGURATION", "Release")

        config = configure(configuration="Signed", build_project_references=True)

        assert config.configuration == "Signed"
        assert config.build_project_references is True
        assert get_config() is config

    def test_reset_config(self):
        """Test reset forgets the configured values."""
        configure(configuration="Release")
        reset_config()

        assert get_config().configuration == "Debug"
