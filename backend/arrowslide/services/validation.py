"""
Arrow Slide - Layout Validation

Used by the editor for hand-built levels and by importers to reject corrupt
level files: structure first, then the deadlock analyzer, then the verifier.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .board import Layout
from .deadlock import DeadlockReport, get_detailed_deadlock_info
from .verifier import verify


@dataclass
class LayoutCheck:
    valid: bool
    solvable: bool
    errors: List[str] = field(default_factory=list)
    report: DeadlockReport = field(default_factory=DeadlockReport)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "solvable": self.solvable,
            "errors": list(self.errors),
            "deadlock": self.report.to_dict(),
        }


def check_layout(layout: Layout, rows: Optional[int] = None, cols: Optional[int] = None) -> LayoutCheck:
    errors = layout.structural_errors(rows, cols)
    if errors:
        return LayoutCheck(valid=False, solvable=False, errors=errors)

    report = get_detailed_deadlock_info(layout.tiles, layout.rows, layout.cols)
    solvable = verify(layout)
    if report.has_deadlock:
        errors.append(report.description)
    if not solvable:
        errors.append("Layout has no clearing order")

    return LayoutCheck(
        valid=solvable and not report.has_deadlock,
        solvable=solvable,
        errors=errors,
        report=report,
    )


def validate_layout(layout: Layout, rows: Optional[int] = None, cols: Optional[int] = None) -> bool:
    """True when the layout is well formed, deadlock free and solvable."""
    return check_layout(layout, rows, cols).valid
