from .models import (
    DataGap,
    EngineSettings,
    ImpactsTuple,
    RecipeComponent,
    ReducedDiet,
    ReferenceTables
)
from .engine import ResultsEngine, ResultsEngineBuilder
from .exceptions import (
    ConfigurationError,
    EngineNotReadyError,
    FootprintEngineError,
    MissingCarrierFactorError,
    RecipeCycleError,
    VectorLengthError
)
from .constants import (
    AGGREGATE_HEADERS,
    RESULTS_FORMAT_VERSION
)

__all__ = [
    "DataGap",
    "EngineSettings",
    "ImpactsTuple",
    "RecipeComponent",
    "ReducedDiet",
    "ReferenceTables",
    "ResultsEngine",
    "ResultsEngineBuilder",
    "ConfigurationError",
    "EngineNotReadyError",
    "FootprintEngineError",
    "MissingCarrierFactorError",
    "RecipeCycleError",
    "VectorLengthError",
    "AGGREGATE_HEADERS",
    "RESULTS_FORMAT_VERSION",
]
