"""
Configuration management with typed Pydantic models.

Provides source-tree layout, output locations, and structural-check
thresholds, loadable from an optional YAML file.
"""

from packagedb.config.loader import load_config
from packagedb.config.settings import (
    BuildConfig,
    Ordering,
    OutputConfig,
    SourceConfig,
    ValidationConfig,
)

__all__ = [
    "BuildConfig",
    "Ordering",
    "OutputConfig",
    "SourceConfig",
    "ValidationConfig",
    "load_config",
]
