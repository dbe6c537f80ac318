"""Exception hierarchy for covwalk.

The search itself never raises: inapplicable transitions, dead ends and
exhausted coverage are all reported as data. Errors exist only at the edges
where user input is validated:

- configuration values (ConfigValidationError)
- coverage criteria registration (CoverageConfigError)
- manually assembled paths whose steps do not chain (PathChainError)

All covwalk errors inherit from CovwalkError and include:
- error_code: an ErrorCode enum for categorization
- context: ErrorContext with state/action/step details
- suggestions: list of actionable steps to resolve the issue

Example:
    try:
        check_path(path)
    except PathChainError as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for suggestion in e.suggestions:
            print(f"  - {suggestion}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for covwalk.

    Error codes are organized by category:
    - E2xx: Validation errors (configuration, coverage criteria)
    - E3xx: Model and path errors
    - E9xx: Unknown/internal errors
    """

    # Validation errors (E2xx)
    INVALID_CONFIG = "E201"
    INVALID_COVERAGE = "E202"

    # Model and path errors (E3xx)
    PATH_NOT_CHAINED = "E301"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if 200 <= code_num < 300:
            return "validation"
        elif 300 <= code_num < 400:
            return "model"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error reporting.

    Attributes:
        state: Rendering of the state involved, if any.
        action: Name of the action involved, if any.
        step_index: Index of the offending step within a path.
        extra: Additional context-specific information.
    """

    state: str | None = None
    action: str | None = None
    step_index: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "state": self.state,
            "action": self.action,
            "step_index": self.step_index,
            "extra": self.extra or None,
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.step_index is not None:
            parts.append(f"step={self.step_index}")
        if self.state:
            parts.append(f"state={self.state}")
        if self.action:
            parts.append(f"action={self.action}")
        return " > ".join(parts) if parts else "unknown location"


class CovwalkError(Exception):
    """Base exception for all covwalk errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with model details
        suggestions: List of actionable steps to resolve the issue
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]
        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "category": self.error_code.category,
            "message": self.message,
            "context": self.context.to_dict(),
            "suggestions": self.suggestions,
        }


class ConfigValidationError(CovwalkError):
    """Raised when a configuration value is invalid."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check the YAML config file and COVWALK_* environment variables",
        "Run load_config() in isolation to see which field is rejected",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.context.extra.setdefault("field", field)


class CoverageConfigError(CovwalkError):
    """Raised when a coverage criterion cannot be registered."""

    error_code = ErrorCode.INVALID_COVERAGE
    default_message = "Invalid coverage criterion"
    default_suggestions = [
        "Use a CoverageKind member or one of its string values",
        "Combination lengths must be positive integers",
    ]


class PathChainError(CovwalkError):
    """Raised when adjacent steps of a path do not connect.

    A step's end state must render equal to the next step's start state.
    """

    error_code = ErrorCode.PATH_NOT_CHAINED
    default_message = "Path steps are not chained"
    default_suggestions = [
        "Build paths with Walker.paths() or Coverer.best_path() instead of by hand",
        "Advance the current state to the end state of the last executed step",
    ]
