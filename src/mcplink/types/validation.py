"""Validation result types shared by the config loader and server imports."""

from dataclasses import dataclass, field


@dataclass
class ValidationIssue:
    """One problem found while validating configuration data."""

    path: str  # e.g. "manager.connect_timeout" or "servers[2].transport"
    message: str
    severity: str = "error"  # "error" | "warning"


@dataclass
class ValidationResult:
    """Outcome of a validation pass."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.errors:
            self.valid = False
