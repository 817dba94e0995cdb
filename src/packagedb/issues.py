"""
Accumulated validation issues.

A single ValidationReport is passed to every check. The ErrorPolicy it
carries decides whether a hard error is recorded (collect-all) or raised
immediately (fail-fast); warnings are always recorded.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from packagedb.errors import ValidationFailure
from packagedb.utils.logging import get_logger

log = get_logger(__name__)


class Severity(str, Enum):
    """How an issue affects the run."""

    ERROR = "error"
    WARNING = "warning"


class IssueKind(str, Enum):
    """Which stage produced an issue."""

    PARSE = "parse"  # Not well-formed, or not decodable to the entity
    SCHEMA = "schema"  # Violates the JSON schema
    STRUCTURAL = "structural"  # Identity, duplicates, ranges, references, coverage


class ErrorPolicy(str, Enum):
    """What to do on the first hard error."""

    FAIL_FAST = "fail-fast"  # Compilation: abort immediately
    COLLECT_ALL = "collect-all"  # Validation: keep going, decide at the end


@dataclass(frozen=True)
class Issue:
    """A single error or warning with its context."""

    severity: Severity
    kind: IssueKind
    message: str
    path: Path | None = None
    subject: str | None = None

    def render(self) -> str:
        """Format as `path: message` (or just the message without a path)."""
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


@dataclass
class ValidationReport:
    """Ordered errors and warnings gathered during one run."""

    policy: ErrorPolicy = ErrorPolicy.COLLECT_ALL
    errors: list[Issue] = field(default_factory=list)
    warnings: list[Issue] = field(default_factory=list)
    packages_validated: int = 0
    groups_validated: int = 0

    @property
    def failed(self) -> bool:
        """True iff at least one hard error was recorded."""
        return bool(self.errors)

    def error(
        self,
        message: str,
        *,
        kind: IssueKind = IssueKind.STRUCTURAL,
        path: Path | None = None,
        subject: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """
        Record a hard error.

        Raises:
            ValidationFailure: Under the fail-fast policy.
        """
        issue = Issue(Severity.ERROR, kind, message, path=path, subject=subject)
        if self.policy is ErrorPolicy.FAIL_FAST:
            log.error("Aborting on first error", kind=kind.value, error=issue.render())
            raise ValidationFailure(issue) from cause
        self.errors.append(issue)

    def warning(
        self,
        message: str,
        *,
        path: Path | None = None,
        subject: str | None = None,
    ) -> None:
        """Record a structural warning; never aborts."""
        self.warnings.append(
            Issue(
                Severity.WARNING,
                IssueKind.STRUCTURAL,
                message,
                path=path,
                subject=subject,
            )
        )

    def merge(self, other: "ValidationReport") -> None:
        """Append another report's issues and counters to this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.packages_validated += other.packages_validated
        self.groups_validated += other.groups_validated

    def errors_of(self, kind: IssueKind) -> list[Issue]:
        """Errors produced by one stage."""
        return [issue for issue in self.errors if issue.kind is kind]

    def lines(self) -> list[str]:
        """
        Render the report as plain text lines.

        Identical input yields identical lines, so two runs over an
        unchanged tree can be diffed byte for byte.
        """
        out = [
            f"packages: {self.packages_validated}",
            f"groups: {self.groups_validated}",
        ]
        out.extend(f"warning: {issue.render()}" for issue in self.warnings)
        out.extend(f"error: {issue.render()}" for issue in self.errors)
        out.append("status: FAILED" if self.failed else "status: PASSED")
        return out
