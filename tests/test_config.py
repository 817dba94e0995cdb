"""Tests for configuration system."""

from pathlib import Path

import pytest

from packagedb.config import (
    BuildConfig,
    Ordering,
    OutputConfig,
    SourceConfig,
    ValidationConfig,
    load_config,
)


class TestSourceConfig:
    """Tests for SourceConfig."""

    def test_defaults(self) -> None:
        """Test default layout."""
        config = SourceConfig()
        assert config.packages_path == Path("packages")
        assert config.groups_path == Path("groups")
        assert config.schemas_path == Path("schemas")
        assert config.extension == ".yaml"

    def test_paths_resolve_against_root(self) -> None:
        """Test directories are resolved against the root."""
        config = SourceConfig(root=Path("/data/db"))
        assert config.packages_path == Path("/data/db/packages")
        assert config.profiles_path == Path("/data/db/profiles")
        assert config.mappings_path == Path("/data/db/mappings")

    def test_extension_gets_leading_dot(self) -> None:
        """Test extension normalization."""
        assert SourceConfig(extension="yml").extension == ".yml"

    def test_empty_extension_rejected(self) -> None:
        """Test that an empty extension raises error."""
        with pytest.raises(ValueError, match="extension"):
            SourceConfig(extension="")

    def test_frozen(self) -> None:
        """Test configs are immutable."""
        config = SourceConfig()
        with pytest.raises(ValueError):
            config.extension = ".yml"  # type: ignore[misc]


class TestValidationConfig:
    """Tests for ValidationConfig."""

    def test_defaults(self) -> None:
        """Test default thresholds."""
        config = ValidationConfig()
        assert config.max_popularity == 100
        assert config.min_platforms == 2
        assert config.tag_pattern == r"^[a-z0-9-]+$"
        assert config.ordering is Ordering.NAME

    def test_invalid_tag_pattern(self) -> None:
        """Test that an uncompilable pattern raises error."""
        with pytest.raises(ValueError, match="Invalid tag_pattern"):
            ValidationConfig(tag_pattern="[a-z")


class TestBuildConfig:
    """Tests for derived output paths."""

    def test_artifact_paths(self) -> None:
        """Test database and checksum paths sit side by side."""
        config = BuildConfig(source=SourceConfig(root=Path("/src")))
        assert config.database_path == Path("/src/target/packages.db")
        assert config.checksum_path == Path("/src/target/packages.db.sha256")

    def test_custom_database_name(self) -> None:
        """Test checksum name follows the database name."""
        config = BuildConfig(output=OutputConfig(database_name="db.bin"))
        assert config.checksum_path.name == "db.bin.sha256"


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """Test defaults are used when no config file exists."""
        config = load_config(root=tmp_path)
        assert config.source.root == tmp_path
        assert config.validation.min_platforms == 2

    def test_explicit_file(self, tmp_path: Path) -> None:
        """Test values from an explicit file."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "validation:\n  min_platforms: 3\n  ordering: discovery\n"
            "output:\n  database_name: db.bin\n"
        )
        config = load_config(config_file)
        assert config.validation.min_platforms == 3
        assert config.validation.ordering is Ordering.DISCOVERY
        assert config.output.database_name == "db.bin"
        # Without a root, the config file's directory is the root
        assert config.source.root == tmp_path

    def test_relative_root_in_file(self, tmp_path: Path) -> None:
        """Test a relative root is taken relative to the config file."""
        config_file = tmp_path / "conf" / "packagedb.yaml"
        config_file.parent.mkdir()
        config_file.write_text("source:\n  root: ../tree\n")
        config = load_config(config_file)
        assert config.source.root == tmp_path / "conf" / "../tree"

    def test_discovers_file_in_root(self, tmp_path: Path) -> None:
        """Test packagedb.yaml in the root is picked up."""
        (tmp_path / "packagedb.yaml").write_text("source:\n  extension: yml\n")
        config = load_config(root=tmp_path)
        assert config.source.extension == ".yml"
        assert config.source.root == tmp_path

    def test_root_argument_wins(self, tmp_path: Path) -> None:
        """Test an explicit root overrides the file."""
        config_file = tmp_path / "packagedb.yaml"
        config_file.write_text("source:\n  root: /elsewhere\n")
        config = load_config(config_file, root=tmp_path / "override")
        assert config.source.root == tmp_path / "override"

    def test_env_var_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ${VAR} and ${VAR:default} interpolation."""
        monkeypatch.setenv("PACKAGEDB_TEST_TARGET", "out")
        monkeypatch.delenv("PACKAGEDB_TEST_MISSING", raising=False)
        config_file = tmp_path / "packagedb.yaml"
        config_file.write_text(
            "output:\n"
            "  target_dir: ${PACKAGEDB_TEST_TARGET}\n"
            "  database_name: ${PACKAGEDB_TEST_MISSING:fallback.db}\n"
        )
        config = load_config(config_file)
        assert config.output.target_dir == Path("out")
        assert config.output.database_name == "fallback.db"

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """Test a missing explicit config file raises error."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_file(self, tmp_path: Path) -> None:
        """Test a config file that is not a mapping raises error."""
        config_file = tmp_path / "packagedb.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_file)

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Test Pydantic rejects invalid values."""
        config_file = tmp_path / "packagedb.yaml"
        config_file.write_text("validation:\n  min_platforms: -1\n")
        with pytest.raises(ValueError):
            load_config(config_file)
