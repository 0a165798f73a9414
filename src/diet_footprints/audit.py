import logging
from typing import Any, Dict, List, Optional

from .constants import GapKind
from .models import DataGap

logger = logging.getLogger(__name__)


class CalculationAudit:
    """
    In-memory audit trail for one computation.

    Calculation steps go to the debug log; data gaps are both logged as
    warnings and kept so callers can inspect them without parsing log output.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.gaps: List[DataGap] = []
        self._seen = set()

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: Any, unit: str = ""):
        """
        Log a calculation step.

        Args:
            context: What is being calculated (e.g., "Transport: A.01.02")
            formula: Text representation of the equation
            variables: Actual values used
            result: The final result (scalar or vector)
            unit: Unit of the result (e.g., "kg CO2e")
        """
        if not self.enabled or not logger.isEnabledFor(logging.DEBUG):
            return

        vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
        logger.debug(f"{context} | {formula} | {vars_str} -> {result} {unit}".rstrip())

    def record_gap(self, kind: GapKind, code: str, detail: str = "") -> DataGap:
        """
        Record a data gap. Identical gaps are kept (and logged) once.
        """
        gap = DataGap(kind=kind, code=code, detail=detail)
        if gap not in self._seen:
            self._seen.add(gap)
            self.gaps.append(gap)
            logger.warning(f"[{kind}] {code}: {detail}" if detail else f"[{kind}] {code}")
        return gap

    def gaps_of_kind(self, kind: GapKind) -> List[DataGap]:
        return [g for g in self.gaps if g.kind == kind]


def record_gap(audit: Optional[CalculationAudit], kind: GapKind, code: str, detail: str = ""):
    """Record on the given audit, or just log when no audit is attached."""
    if audit is not None:
        audit.record_gap(kind, code, detail)
    else:
        logger.warning(f"[{kind}] {code}: {detail}" if detail else f"[{kind}] {code}")
