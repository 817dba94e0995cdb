"""
Aggregate statistics over validated records.

Counts packages per category, package manager coverage and tags, counts
the profile and mapping files next to the records, and produces README
badge markdown.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from packagedb.ingestion.loader import discover_files
from packagedb.models import PACKAGE_MANAGERS, PLATFORM_NAMES, Package, PackageGroup


@dataclass
class DatabaseStats:
    """Aggregate numbers for one source tree."""

    total_packages: int
    total_groups: int
    total_tags: int
    total_profiles: int = 0
    total_mappings: int = 0
    packages_by_category: list[tuple[str, int]] = field(default_factory=list)
    platform_coverage: dict[str, int] = field(default_factory=dict)
    database_size: int | None = None

    def coverage_percent(self, platform: str) -> float:
        """Share of packages available on a platform (0 when there are none)."""
        if self.total_packages == 0:
            return 0.0
        return self.platform_coverage.get(platform, 0) / self.total_packages * 100.0


def packages_frame(packages: Sequence[Package]) -> pd.DataFrame:
    """One row per package: name, category and a bool column per platform."""
    columns = ["name", "category", *PLATFORM_NAMES]
    rows = []
    for p in packages:
        available = set(p.platforms.available())
        rows.append(
            {"name": p.name, "category": p.category}
            | {platform: platform in available for platform in PLATFORM_NAMES}
        )
    return pd.DataFrame(rows, columns=columns)


def _count_files(directory: Path | None, extension: str) -> int:
    """Number of record files under a directory; 0 if it is absent."""
    if directory is None:
        return 0
    return len(discover_files(directory, extension))


def compute_stats(
    packages: Sequence[Package],
    groups: Sequence[PackageGroup],
    database_path: Path | None = None,
    profiles_dir: Path | None = None,
    mappings_dir: Path | None = None,
    extension: str = ".yaml",
) -> DatabaseStats:
    """
    Compute statistics over validated records.

    Args:
        packages: Validated packages.
        groups: Validated groups.
        database_path: Compiled database, sized if it exists.
        profiles_dir: Directory of profile files to count, if any.
        mappings_dir: Directory of mapping files to count, if any.
        extension: Recognized file extension for profiles and mappings.

    Returns:
        DatabaseStats with categories ordered by count, then name.
    """
    df = packages_frame(packages)

    category_counts = df.groupby("category").size()
    by_category = sorted(
        ((str(category), int(count)) for category, count in category_counts.items()),
        key=lambda kv: (-kv[1], kv[0]),
    )
    coverage = {platform: int(df[platform].sum()) for platform in PACKAGE_MANAGERS}
    tags = {tag for p in packages for tag in p.tags}

    size = None
    if database_path is not None and database_path.is_file():
        size = database_path.stat().st_size

    return DatabaseStats(
        total_packages=len(df),
        total_groups=len(groups),
        total_tags=len(tags),
        total_profiles=_count_files(profiles_dir, extension),
        total_mappings=_count_files(mappings_dir, extension),
        packages_by_category=by_category,
        platform_coverage=coverage,
        database_size=size,
    )


def badge_markdown(stats: DatabaseStats) -> list[str]:
    """Shields.io badges for a README."""
    badges = [
        f"[![Packages](https://img.shields.io/badge/packages-{stats.total_packages}"
        "-green.svg)](#packages)"
    ]
    if stats.database_size is not None:
        size_kb = round(stats.database_size / 1024)
        badges.append(
            f"[![Database Size](https://img.shields.io/badge/database-{size_kb}KB"
            "-orange.svg)](#database)"
        )
    return badges


class StatsReporter:
    """Displays DatabaseStats on the console."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def print_stats(self, stats: DatabaseStats) -> None:
        """Print overview, categories, platform coverage and badges."""
        overview = Table(title="Database Overview", show_header=False)
        overview.add_column("Metric", style="cyan")
        overview.add_column("Value", style="green", justify="right")
        overview.add_row("Packages", str(stats.total_packages))
        overview.add_row("Groups", str(stats.total_groups))
        overview.add_row("Tags", str(stats.total_tags))
        overview.add_row("Profiles", str(stats.total_profiles))
        overview.add_row("Mappings", str(stats.total_mappings))
        if stats.database_size is None:
            overview.add_row("DB Size", "[yellow]Not compiled[/yellow]")
        else:
            overview.add_row(
                "DB Size", f"{stats.database_size} bytes ({stats.database_size / 1024:.2f} KB)"
            )
        self.console.print(overview)

        categories = Table(title="Packages by Category")
        categories.add_column("Category", style="cyan")
        categories.add_column("Packages", style="green", justify="right")
        for category, count in stats.packages_by_category:
            categories.add_row(category, str(count))
        self.console.print(categories)

        coverage = Table(title="Platform Coverage")
        coverage.add_column("Platform", style="cyan")
        coverage.add_column("Packages", style="green", justify="right")
        coverage.add_column("Share", justify="right")
        for platform in PACKAGE_MANAGERS:
            coverage.add_row(
                platform,
                str(stats.platform_coverage.get(platform, 0)),
                f"{stats.coverage_percent(platform):.0f}%",
            )
        self.console.print(coverage)

        self.console.print("[bold]Badge Markdown (for README):[/bold]")
        for badge in badge_markdown(stats):
            self.console.print(f"  {badge}", markup=False)
