"""
Design trace: the ordered audit record of a beam section design run.

Each check appends exactly one entry when it resolves. Entries are frozen
once created and the recorder only ever appends, so the sequence read back
is the order in which decisions were taken.
"""

from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field


class CalcStatus(str, Enum):
    """Outcome attached to a trace entry."""
    NONE = "none"
    PASS = "pass"
    FAIL = "fail"


class FailureKind(str, Enum):
    """Terminal design failures. Each ends the run with a FAIL entry."""
    CONCRETE_CAPACITY_EXCEEDED = "concrete_capacity_exceeded"
    REINFORCEMENT_LAYOUT_INFEASIBLE = "reinforcement_layout_infeasible"
    SECTION_CAPACITY_EXCEEDED = "section_capacity_exceeded"


class DesignTraceEntry(BaseModel):
    """
    One narrated check.

    Attributes:
        narrative: Heading, e.g. "Bending Reinforcement check"
        expressions: Formatted expressions in evaluation order
        ref: EN 1992-1-1 clause or equation number
        conclusion: Short verdict text
        status: CalcStatus of the check
    """
    model_config = ConfigDict(frozen=True)

    narrative: str
    expressions: Tuple[str, ...] = Field(default_factory=tuple)
    ref: Optional[str] = None
    conclusion: Optional[str] = None
    status: CalcStatus = CalcStatus.NONE

    @property
    def failed(self) -> bool:
        return self.status == CalcStatus.FAIL


class DesignTrace:
    """Append-only recorder of DesignTraceEntry objects for a single run."""

    def __init__(self):
        self._entries: List[DesignTraceEntry] = []

    def append(self, entry: DesignTraceEntry) -> DesignTraceEntry:
        if not isinstance(entry, DesignTraceEntry):
            raise TypeError(f"Expected DesignTraceEntry, got {type(entry).__name__}")
        self._entries.append(entry)
        return entry

    def record(
        self,
        narrative: str,
        expressions: Sequence[str] = (),
        ref: Optional[str] = None,
        conclusion: Optional[str] = None,
        status: CalcStatus = CalcStatus.NONE
    ) -> DesignTraceEntry:
        """Build an entry from its parts and append it."""
        return self.append(DesignTraceEntry(
            narrative=narrative,
            expressions=tuple(expressions),
            ref=ref,
            conclusion=conclusion,
            status=status,
        ))

    @property
    def entries(self) -> Tuple[DesignTraceEntry, ...]:
        return tuple(self._entries)

    @property
    def failed(self) -> bool:
        """True if any entry carries a FAIL status."""
        return any(entry.failed for entry in self._entries)

    def to_dataframe(self) -> pd.DataFrame:
        return trace_to_dataframe(self._entries)

    def __iter__(self) -> Iterator[DesignTraceEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)


def trace_to_dataframe(entries: Sequence[DesignTraceEntry]) -> pd.DataFrame:
    """
    Tabulate trace entries, one row per entry.

    Expressions are joined with newlines so each entry stays on one row.
    """
    rows = [
        {
            "Step": i + 1,
            "Narrative": entry.narrative,
            "Expressions": "\n".join(entry.expressions),
            "Ref": entry.ref or "",
            "Conclusion": entry.conclusion or "",
            "Status": entry.status.value,
        }
        for i, entry in enumerate(entries)
    ]
    return pd.DataFrame(rows, columns=["Step", "Narrative", "Expressions", "Ref", "Conclusion", "Status"])


def format_trace(entries: Sequence[DesignTraceEntry]) -> str:
    """Render trace entries as a plain-text calculation narrative."""
    lines = []
    for entry in entries:
        heading = entry.narrative
        if entry.ref:
            heading += f"  [{entry.ref}]"
        lines.append(heading)
        lines.append("-" * len(heading))
        for expression in entry.expressions:
            lines.append(f"  {expression}")
        if entry.conclusion:
            lines.append(f"  => {entry.conclusion}")
        if entry.status != CalcStatus.NONE:
            lines.append(f"  Status: {entry.status.value.upper()}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
