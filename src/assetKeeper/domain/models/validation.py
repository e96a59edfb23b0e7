from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional


class ValidationLevel(IntEnum):
    """Severity of a finding; ordered so ``max()`` yields the worst one."""

    INFO = 0
    WARNING = 1
    ERROR = 2
    CRITICAL = 3


@dataclass(frozen=True)
class ValidationFinding:
    level: ValidationLevel
    message: str
    field_name: str = ""
    suggestion: str = ""
    asset_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        where = f" [{self.field_name}]" if self.field_name else ""
        return f"{self.level.name}{where}: {self.message}"


@dataclass
class ValidationReport:
    """Bulk container for findings. Empty means fully valid."""

    findings: List[ValidationFinding] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self) -> Iterator[ValidationFinding]:
        return iter(self.findings)

    def __bool__(self) -> bool:
        return bool(self.findings)

    @property
    def is_valid(self) -> bool:
        return not self.findings

    @property
    def has_errors(self) -> bool:
        return any(f.level >= ValidationLevel.ERROR for f in self.findings)

    @property
    def has_critical(self) -> bool:
        return any(f.level == ValidationLevel.CRITICAL for f in self.findings)

    @property
    def highest_level(self) -> Optional[ValidationLevel]:
        if not self.findings:
            return None
        return max(f.level for f in self.findings)

    def add(self, finding: ValidationFinding) -> None:
        self.findings.append(finding)

    def extend(self, findings: Iterable[ValidationFinding]) -> None:
        self.findings.extend(findings)

    def by_level(self, level: ValidationLevel) -> List[ValidationFinding]:
        return [f for f in self.findings if f.level == level]

    def by_field(self, field_name: str) -> List[ValidationFinding]:
        return [f for f in self.findings if f.field_name == field_name]

    def for_asset(self, asset_id: str) -> List[ValidationFinding]:
        return [f for f in self.findings if f.asset_id == asset_id]
