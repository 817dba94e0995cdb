"""
Structural checks the JSON schemas cannot express.

Every check takes the full in-memory collection and writes to the
ValidationReport it is given. Hard errors go through `report.error`, which
raises under the fail-fast policy; advisory findings go through
`report.warning`.
"""

import re
from collections.abc import Iterable, Sequence

from packagedb.ingestion.loader import LoadedEntity
from packagedb.issues import ValidationReport
from packagedb.models import Package, PackageGroup
from packagedb.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_TAG_PATTERN = r"^[a-z0-9-]+$"


def check_identity(item: LoadedEntity[Package], report: ValidationReport) -> bool:
    """
    Check that the file stem equals the declared package name.

    Returns:
        True if they agree.
    """
    package = item.entity
    if item.record.stem == package.name:
        return True
    expected = f"{package.name}{item.path.suffix}"
    report.error(
        f"Filename '{item.path.name}' doesn't match package name "
        f"'{package.name}' (expected '{expected}')",
        path=item.path,
        subject=package.name,
    )
    return False


def check_popularity(
    item: LoadedEntity[Package],
    report: ValidationReport,
    maximum: int = 100,
) -> None:
    """Check the popularity upper bound."""
    popularity = item.entity.popularity
    if popularity > maximum:
        report.error(
            f"Field 'popularity' is {popularity}, exceeds maximum of {maximum}",
            path=item.path,
            subject=item.entity.name,
        )


def check_tags(
    item: LoadedEntity[Package],
    report: ValidationReport,
    pattern: str = DEFAULT_TAG_PATTERN,
) -> None:
    """Warn about tags outside the lowercase-hyphenated form."""
    compiled = re.compile(pattern)
    for tag in item.entity.tags:
        if not compiled.fullmatch(tag):
            report.warning(
                f"Tag '{tag}' should be lowercase with hyphens only (must match {pattern})",
                path=item.path,
                subject=item.entity.name,
            )


def check_duplicates(
    items: Sequence[LoadedEntity[Package]],
    report: ValidationReport,
) -> list[LoadedEntity[Package]]:
    """
    Reject package names that occur more than once.

    The first occurrence in traversal order wins; each later one is an
    error naming both source paths.

    Returns:
        The items with later duplicates removed.
    """
    seen: dict[str, LoadedEntity[Package]] = {}
    unique: list[LoadedEntity[Package]] = []

    for item in items:
        name = item.entity.name
        first = seen.get(name)
        if first is not None:
            report.error(
                f"Duplicate package name '{name}' (first seen in {first.path})",
                path=item.path,
                subject=name,
            )
            continue
        seen[name] = item
        unique.append(item)

    return unique


def _check_names(
    names: Iterable[str],
    known: set[str],
    describe: str,
    owner: str,
) -> list[str]:
    """Messages for every name that does not resolve."""
    return [f"{owner} {describe}: '{name}'" for name in names if name not in known]


def check_references(
    packages: Sequence[LoadedEntity[Package]],
    groups: Sequence[LoadedEntity[PackageGroup]],
    report: ValidationReport,
) -> None:
    """
    Check that package and group references resolve.

    Dependencies and group package lists must resolve (errors);
    alternatives and related packages are advisory (warnings). Platform
    overrides hold package-manager-native names and are not checked.
    """
    known = {item.entity.name for item in packages}

    for item in packages:
        package = item.entity
        owner = f"Package '{package.name}'"
        hard = _check_names(
            (dep.package for dep in package.dependencies.required),
            known,
            "has unknown required dependency",
            owner,
        ) + _check_names(
            (dep.package for dep in package.dependencies.optional),
            known,
            "has unknown optional dependency",
            owner,
        )
        for message in hard:
            report.error(message, path=item.path, subject=package.name)

        soft = _check_names(
            package.alternatives, known, "references unknown alternative", owner
        ) + _check_names(
            package.related, known, "references unknown related package", owner
        )
        for message in soft:
            report.warning(message, path=item.path, subject=package.name)

    for item in groups:
        group = item.entity
        owner = f"Group '{group.id}'"
        hard = _check_names(
            group.packages.required, known, "references unknown required package", owner
        ) + _check_names(
            group.packages.optional, known, "references unknown optional package", owner
        )
        for message in hard:
            report.error(message, path=item.path, subject=group.id)

    log.debug("Checked references", packages=len(packages), groups=len(groups))


def check_platform_coverage(
    packages: Sequence[LoadedEntity[Package]],
    report: ValidationReport,
    minimum: int = 2,
) -> None:
    """
    Warn about packages mapped on fewer than `minimum` package managers.

    The App Store id does not count towards coverage.
    """
    for item in packages:
        count = item.entity.platforms.package_manager_count()
        if count < minimum:
            report.warning(
                f"Package '{item.entity.name}' has only {count} platform mapping(s) "
                f"(recommended: at least {minimum})",
                path=item.path,
                subject=item.entity.name,
            )
