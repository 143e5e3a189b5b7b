import logging
from enum import Enum
from typing import Dict, List, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

SUPPORTED_HTMX_VERSIONS = ("2", "4")
DEFAULT_HTMX_VERSION = "2"


class Severity(str, Enum):
    """Two-level classification attached to every finding."""
    ERROR = "error"
    WARNING = "warning"


class LintResult(BaseModel):
    """
    Data model representing a single finding produced by a lint rule.
    Results are immutable once a rule has emitted them.
    """
    model_config = ConfigDict(frozen=True)

    rule: str  # e.g., 'valid-id', 'htmx-attributes'
    message: str  # Human-readable description of the issue
    filename: str
    line: int = 1
    col: int = 1
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.col}: {self.severity.value}: {self.message} ({self.rule})"


class FrameworkConfig(BaseModel):
    """
    Companion framework support. Only htmx is known; its version selects
    which event and attribute vocabulary applies.
    """
    htmx: bool = False
    htmx_version: str = DEFAULT_HTMX_VERSION

    @field_validator('htmx_version', mode='before')
    @classmethod
    def normalize_version(cls, v) -> str:
        """
        Falls back to the older vocabulary for empty or unknown versions.
        Accepts loose spellings like 'v4' or '2.0.4'.
        """
        if v is None:
            return DEFAULT_HTMX_VERSION
        raw = str(v).strip().lower().lstrip('v')
        major = raw.split('.', 1)[0]
        if major in SUPPORTED_HTMX_VERSIONS:
            return major
        if raw:
            logger.warning("Unknown htmx version '%s', falling back to htmx %s", v, DEFAULT_HTMX_VERSION)
        return DEFAULT_HTMX_VERSION


class LinterConfig(BaseModel):
    """Configuration surface consumed by the linter core."""
    disabled_rules: Set[str] = Field(default_factory=set)
    ignore_patterns: List[str] = Field(default_factory=list)
    errors_only: bool = False
    frameworks: FrameworkConfig = Field(default_factory=FrameworkConfig)

    def is_enabled(self, rule_name: str) -> bool:
        return rule_name not in self.disabled_rules


class LintRunSummary(BaseModel):
    """Aggregated outcome of linting a set of files."""
    results: List[LintResult] = Field(default_factory=list)
    files_checked: int = 0
    failed_files: Dict[str, str] = Field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if r.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for r in self.results if not r.is_error)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0 or bool(self.failed_files)
