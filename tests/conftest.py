"""Pytest configuration and shared fixtures."""

import shutil
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

from packagedb.config import BuildConfig, SourceConfig


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo any logging configuration a test (or a CLI invocation) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_data_dir(project_root: Path) -> Path:
    """Return the test data directory."""
    return project_root / "tests" / "data"


@pytest.fixture
def source_root(tmp_path: Path, test_data_dir: Path) -> Path:
    """Create an empty source tree with the bundled schemas."""
    root = tmp_path / "db"
    shutil.copytree(test_data_dir / "schemas", root / "schemas")
    (root / "packages").mkdir()
    return root


@pytest.fixture
def build_config(source_root: Path) -> BuildConfig:
    """Build configuration pointing at the temporary source tree."""
    return BuildConfig(source=SourceConfig(root=source_root))


@pytest.fixture
def make_package() -> Callable[..., dict[str, Any]]:
    """Factory for valid package documents (two platforms, one tag)."""

    def factory(name: str, **overrides: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": name,
            "description": f"The {name} tool",
            "category": "other",
            "popularity": 50,
            "platforms": {"apt": name, "brew": name},
            "tags": ["cli"],
        }
        data.update(overrides)
        return data

    return factory


@pytest.fixture
def make_group() -> Callable[..., dict[str, Any]]:
    """Factory for valid group documents."""

    def factory(group_id: str, required: list[str], **overrides: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": group_id,
            "name": group_id.replace("-", " ").title(),
            "description": f"The {group_id} group",
            "category": "development",
            "packages": {"required": required},
        }
        data.update(overrides)
        return data

    return factory


def _write_yaml(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def write_package(source_root: Path) -> Callable[..., Path]:
    """Write a package document; the file name defaults to `<name>.yaml`."""

    def writer(data: dict[str, Any], filename: str | None = None, subdir: str = "") -> Path:
        filename = filename or f"{data['name']}.yaml"
        return _write_yaml(source_root / "packages" / subdir / filename, data)

    return writer


@pytest.fixture
def write_group(source_root: Path) -> Callable[..., Path]:
    """Write a group document as `groups/<id>.yaml`."""

    def writer(data: dict[str, Any], filename: str | None = None) -> Path:
        filename = filename or f"{data['id']}.yaml"
        return _write_yaml(source_root / "groups" / filename, data)

    return writer


@pytest.fixture
def populated_tree(
    source_root: Path,
    make_package: Callable[..., dict[str, Any]],
    make_group: Callable[..., dict[str, Any]],
    write_package: Callable[..., Path],
    write_group: Callable[..., Path],
) -> Path:
    """A small valid tree: five packages in subdirectories and two groups."""
    write_package(
        make_package(
            "ripgrep",
            category="essential",
            popularity=95,
            tags=["search", "rust"],
            alternatives=["fd"],
            website="https://github.com/BurntSushi/ripgrep",
            license="MIT",
        ),
        subdir="essential",
    )
    write_package(
        make_package("fd", category="essential", tags=["search", "rust", "find"]),
        subdir="essential",
    )
    write_package(
        make_package(
            "neovim",
            category="editor",
            popularity=90,
            platforms={"apt": "neovim", "brew": "neovim", "dnf": "neovim", "pacman": "neovim"},
            tags=["editor", "vim"],
            dependencies={
                "required": [],
                "optional": [{"package": "ripgrep", "reason": "Telescope live grep"}],
            },
            related=["vim"],
        ),
        subdir="editors",
    )
    write_package(
        make_package("vim", category="editor", tags=["editor", "vim"]),
        subdir="editors",
    )
    write_package(
        make_package(
            "git",
            category="git",
            popularity=100,
            platforms={"apt": "git", "brew": "git", "mas": None},
            tags=["vcs"],
        )
    )
    write_group(
        make_group(
            "editors",
            ["neovim"],
            packages={"required": ["neovim"], "optional": ["vim"]},
            platform_overrides={"macos": {"packages": ["neovim"], "casks": ["neovide"]}},
        )
    )
    write_group(make_group("cli-essentials", ["ripgrep", "fd", "git"]))
    return source_root
