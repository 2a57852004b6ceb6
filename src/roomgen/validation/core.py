"""
Validation result types and package exceptions.

Checks return a ValidationResult holding coded issues. A result passes
unless one of its issues is FAIL.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class Severity(Enum):
    """How serious an issue is. Only FAIL makes a result fail."""
    INFO = auto()
    WARN = auto()
    FAIL = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class ValidationIssue:
    """One finding, e.g. ``MESH-001`` at ``Walls triangle 12``."""
    severity: Severity
    code: str
    message: str
    location: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.severity}] {self.code} at={self.location or '-'} :: {self.message}"


@dataclass
class ValidationResult:
    """Issues found by one or more checks."""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.with_severity(Severity.FAIL)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.with_severity(Severity.WARN)

    def with_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def report(self) -> str:
        """Multi-line summary, most severe issues first."""
        if not self.issues:
            return "Validation passed: No issues found"

        status = "PASSED" if self.passed else "FAILED"
        lines = [f"Validation {status}: {len(self.issues)} issue(s)"]
        for severity in (Severity.FAIL, Severity.WARN, Severity.INFO):
            lines.extend(f"  {issue}" for issue in self.with_severity(severity))
        return "\n".join(lines)


class RoomGenError(Exception):
    """Base exception for room generation errors."""


class ValidationError(RoomGenError):
    """Raised by fail-fast validation; ``result`` holds the failed result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
