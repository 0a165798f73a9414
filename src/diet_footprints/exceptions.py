"""
Exceptions raised by the footprint engine.

Only configuration problems that would make every result wrong are raised.
Per-item data gaps are recorded as DataGap entries instead (see audit.py).

    FootprintEngineError
    ├── ConfigurationError
    │   ├── RecipeCycleError
    │   ├── MissingCarrierFactorError
    │   └── EngineNotReadyError
    └── VectorLengthError
"""
from typing import Any, Dict, List, Optional


class FootprintEngineError(Exception):
    """Base exception, carrying a context dict with error-specific details."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class ConfigurationError(FootprintEngineError):
    """Reference data or settings that make the computation impossible."""


class RecipeCycleError(ConfigurationError):
    def __init__(self, cycle: List[str]):
        super().__init__(
            "Cyclic recipe graph: " + " -> ".join(cycle),
            context={"cycle": list(cycle)},
        )
        self.cycle = list(cycle)


class MissingCarrierFactorError(ConfigurationError):
    def __init__(self, carrier: str, country_code: str, process_code: Optional[str] = None):
        super().__init__(
            "Could not find process carrier impacts for "
            f"(carrier, country) = ({carrier}, {country_code})",
            context={"carrier": carrier, "country_code": country_code, "process_code": process_code},
        )
        self.carrier = carrier
        self.country_code = country_code


class EngineNotReadyError(ConfigurationError):
    def __init__(self, missing: List[str]):
        super().__init__(
            "Reference tables must be set before computing: " + ", ".join(missing),
            context={"missing": list(missing)},
        )
        self.missing = list(missing)


class VectorLengthError(FootprintEngineError):
    """Index-aligned vectors that do not share the same length."""
