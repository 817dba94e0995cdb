"""
Core validation routine shared by the validate and compile commands.

One routine serves both modes; the ErrorPolicy on the report decides
whether the first hard error aborts (compile) or everything is collected
(validate).
"""

from dataclasses import dataclass, field
from typing import TypeVar

from pydantic import BaseModel

from packagedb.config.settings import BuildConfig, Ordering
from packagedb.ingestion.loader import LoadedEntity, RecordLoader, parse_entity
from packagedb.issues import ErrorPolicy, IssueKind, ValidationReport
from packagedb.models import Package, PackageGroup
from packagedb.utils.logging import get_logger, log_context
from packagedb.validation.schema import SchemaRegistry, SchemaValidator
from packagedb.validation.structural import (
    check_duplicates,
    check_identity,
    check_platform_coverage,
    check_popularity,
    check_references,
    check_tags,
)

log = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class ValidationOutcome:
    """
    Result of validating a source tree.

    Attributes:
        packages: Packages that passed parsing and schema checks, later
            duplicates removed, in final collection order.
        groups: Groups that passed parsing and schema checks.
        report: All errors and warnings of the run.
    """

    packages: list[Package] = field(default_factory=list)
    groups: list[PackageGroup] = field(default_factory=list)
    report: ValidationReport = field(default_factory=ValidationReport)

    @property
    def passed(self) -> bool:
        """True if no hard error was recorded."""
        return not self.report.failed


class ValidationRunner:
    """
    Runs all validation stages over a source tree.

    Stages, in order: load, schema-check and decode packages and groups;
    duplicate names; per-package identity, popularity and tags; references;
    platform coverage.
    """

    def __init__(
        self,
        config: BuildConfig,
        policy: ErrorPolicy = ErrorPolicy.COLLECT_ALL,
        schemas: SchemaRegistry | None = None,
    ) -> None:
        """
        Initialize validation runner.

        Args:
            config: Build configuration with source layout and thresholds.
            policy: Fail-fast for compilation, collect-all for validation.
            schemas: Pre-compiled schemas; loaded from the source tree if None.
        """
        self.config = config
        self.policy = policy
        self.schemas = schemas

    def run(self) -> ValidationOutcome:
        """
        Validate the whole source tree.

        Returns:
            ValidationOutcome with the surviving entities and the report.

        Raises:
            SchemaLoadError: If a schema document is missing or invalid.
            ValidationFailure: On the first hard error under fail-fast.
        """
        source = self.config.source
        rules = self.config.validation
        schemas = self.schemas or SchemaRegistry.from_directory(source.schemas_path)

        package_report = ValidationReport(policy=self.policy)
        with log_context(kind="package"):
            packages = self._load_kind(
                RecordLoader(source.packages_path, "package", source.extension),
                schemas.get("package"),
                Package,
                package_report,
            )
        package_report.packages_validated = len(packages)

        group_report = ValidationReport(policy=self.policy)
        with log_context(kind="group"):
            groups = self._load_kind(
                RecordLoader(source.groups_path, "group", source.extension),
                schemas.get("group"),
                PackageGroup,
                group_report,
            )
        group_report.groups_validated = len(groups)

        report = ValidationReport(policy=self.policy)
        report.merge(package_report)
        report.merge(group_report)

        packages = check_duplicates(packages, report)
        for item in packages:
            check_identity(item, report)
            check_popularity(item, report, maximum=rules.max_popularity)
            check_tags(item, report, pattern=rules.tag_pattern)
        check_references(packages, groups, report)
        check_platform_coverage(packages, report, minimum=rules.min_platforms)

        if rules.ordering is Ordering.NAME:
            packages = sorted(packages, key=lambda item: item.entity.name)
            groups = sorted(groups, key=lambda item: item.entity.id)

        log.info(
            "Validation finished",
            packages=len(packages),
            groups=len(groups),
            errors=len(report.errors),
            warnings=len(report.warnings),
        )
        return ValidationOutcome(
            packages=[item.entity for item in packages],
            groups=[item.entity for item in groups],
            report=report,
        )

    def _load_kind(
        self,
        loader: RecordLoader,
        schema: SchemaValidator,
        model: type[M],
        report: ValidationReport,
    ) -> list[LoadedEntity[M]]:
        """
        Load, schema-check and decode all records of one kind.

        A record failing any stage is excluded from everything after it.
        """
        items: list[LoadedEntity[M]] = []

        for record in loader.load(report):
            violations = schema.errors(record.document)
            if violations:
                for violation in violations:
                    report.error(violation, kind=IssueKind.SCHEMA, path=record.path)
                continue

            entity = parse_entity(record, model, report)
            if entity is None:
                continue
            items.append(LoadedEntity(record=record, entity=entity))

        return items
