"""
Results engine: ties waste adjustment, recipe reduction, origin aggregation,
footprint flattening and the emission calculators together.

Reference tables are collected on a ResultsEngineBuilder and frozen into a
ResultsEngine by build(). The engine never changes after construction, so one
engine can serve any number of computations; a new table means a new build.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np

from .audit import CalculationAudit
from .exceptions import EngineNotReadyError
from .footprints import flatten_rpc_footprints
from .impacts import aggregate_impacts, aggregate_impacts_by_category
from .models import (
    CarrierFactors, DataGap, Diet, EngineSettings, ImpactsTuple, ReducedDiet,
    ReferenceTables, RpcOriginWaste
)
from .origins import aggregate_amounts_per_origin, aggregate_rest_of_world, origins_with_footprint_data
from .processes import compute_packaging_impacts, compute_process_impacts, get_process_env_factors
from .recipes import normalize_recipes, reduce_diet, validate_recipes
from .transport import compute_transport_emissions
from .waste import adjust_diet_for_waste

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "recipes",
    "waste",
    "rpc_origin_waste",
    "footprints_by_origin",
    "process_energy_demands",
    "carrier_ghg_factors",
    "packaging_emission_factors",
    "transport_emission_factors",
]


class ResultsEngineBuilder:
    """
    Collects reference tables. Setters replace the previous value and return
    the builder, so calls can be chained:

        engine = (ResultsEngineBuilder()
                  .set_recipes(recipes)
                  ...
                  .build())
    """

    def __init__(self):
        self._tables: Dict[str, Any] = {}
        self._settings = EngineSettings()

    def _set(self, name: str, table) -> "ResultsEngineBuilder":
        self._tables[name] = table
        return self

    def set_recipes(self, recipes: Mapping[str, Iterable]) -> "ResultsEngineBuilder":
        return self._set("recipes", normalize_recipes(recipes))

    def set_waste(self, waste: Dict[str, List[float]]) -> "ResultsEngineBuilder":
        return self._set("waste", waste)

    def set_rpc_origin_waste(self, rpc_origin_waste: RpcOriginWaste) -> "ResultsEngineBuilder":
        return self._set("rpc_origin_waste", rpc_origin_waste)

    def set_footprints_by_origin(self, footprints: Dict[str, Dict[str, List[float]]]) -> "ResultsEngineBuilder":
        return self._set("footprints_by_origin", footprints)

    def set_process_energy_demands(self, demands: Dict[str, List[float]]) -> "ResultsEngineBuilder":
        return self._set("process_energy_demands", demands)

    def set_carrier_ghg_factors(self, factors: CarrierFactors) -> "ResultsEngineBuilder":
        return self._set("carrier_ghg_factors", factors)

    def set_packaging_emission_factors(self, factors: Dict[str, List[float]]) -> "ResultsEngineBuilder":
        return self._set("packaging_emission_factors", factors)

    def set_transport_emission_factors(self, factors: Dict[str, Dict[str, List[float]]]) -> "ResultsEngineBuilder":
        return self._set("transport_emission_factors", factors)

    def set_preparation_processes(self, processes: Dict[str, List[str]]) -> "ResultsEngineBuilder":
        return self._set("preparation_processes", processes)

    def set_packaging_codes(self, codes: Dict[str, str]) -> "ResultsEngineBuilder":
        return self._set("packaging_codes", codes)

    def set_settings(self, settings: Optional[EngineSettings] = None, **overrides) -> "ResultsEngineBuilder":
        self._settings = replace(settings or self._settings, **overrides)
        return self

    def missing_tables(self) -> List[str]:
        return [name for name in REQUIRED_TABLES if self._tables.get(name) is None]

    def is_ready(self) -> bool:
        return not self.missing_tables()

    def build(self) -> "ResultsEngine":
        missing = self.missing_tables()
        if missing:
            logger.error(f"Cannot build results engine, missing tables: {', '.join(missing)}")
            raise EngineNotReadyError(missing)
        return ResultsEngine(ReferenceTables(**self._tables), self._settings)


class ResultsEngine:
    """
    Computes diet impacts from a fixed set of reference tables.

    Derived at construction:
    - origins with footprint data per RPC
    - the RoW-aggregated origin-waste table
    - flattened footprints per kg of each RPC
    - per-kg process GHG factors for the computing country
    """

    def __init__(self, tables: ReferenceTables, settings: Optional[EngineSettings] = None):
        self.tables = tables
        self.settings = settings or EngineSettings()

        validate_recipes(tables.recipes)

        build_audit = CalculationAudit()
        self.origins_with_footprints = origins_with_footprint_data(tables.footprints_by_origin)
        self.rpc_origin_waste = aggregate_rest_of_world(
            tables.rpc_origin_waste, self.origins_with_footprints, self.settings.row_threshold
        )
        self.rpc_footprints = flatten_rpc_footprints(
            tables.footprints_by_origin, self.rpc_origin_waste, build_audit
        )
        self.process_factors = get_process_env_factors(
            self.settings.country_code, tables.process_energy_demands, tables.carrier_ghg_factors
        )

        self.transport_factors = tables.transport_emission_factors.get(self.settings.country_code)
        if self.transport_factors is None:
            logger.warning(f"No transport emission factors for country {self.settings.country_code}.")
            self.transport_factors = {}

        self.build_gaps: List[DataGap] = list(build_audit.gaps)
        logger.info(
            f"Results engine ready for {self.settings.country_code}: "
            f"{len(self.rpc_footprints)} RPC footprints, {len(self.process_factors)} processes"
        )

    def _gross_diet(self, diet: Diet, with_waste: bool, audit: Optional[CalculationAudit]) -> Diet:
        diet = [(code, float(amount)) for code, amount in diet]
        if not with_waste:
            return diet
        return adjust_diet_for_waste(diet, self.tables.waste, audit)

    def reduce_diet(
        self,
        diet: Diet,
        with_waste: bool = True,
        audit: Optional[CalculationAudit] = None
    ) -> ReducedDiet:
        """
        Reduce a diet to (rpc_amounts, process_amounts, packaging_amounts,
        transportless_amounts), amounts in grams.
        """
        return reduce_diet(
            self._gross_diet(diet, with_waste, audit),
            self.tables.recipes,
            self.tables.preparation_processes,
            self.tables.packaging_codes,
        )

    def compute_impacts(self, diet: Diet, with_waste: bool = True) -> ImpactsTuple:
        """
        Impacts of a diet. RPCs without footprint or transport data come out
        as None; every data gap met is listed on the result.
        """
        audit = CalculationAudit()
        reduced = self.reduce_diet(diet, with_waste, audit)

        rpc_footprints: Dict[str, Optional[np.ndarray]] = {}
        transport_emissions: Dict[str, Optional[np.ndarray]] = {}

        for rpc_code, amount in reduced.rpc_amounts:
            footprint = self.rpc_footprints.get(rpc_code)
            if footprint is None:
                audit.record_gap("missing_footprint", rpc_code, "no flattened footprint")
                rpc_footprints[rpc_code] = None
            else:
                rpc_footprints[rpc_code] = footprint * amount / 1000

            transported_kg = max(0.0, amount - reduced.transportless_amounts.get(rpc_code, 0.0)) / 1000
            transport_emissions[rpc_code] = compute_transport_emissions(
                rpc_code,
                transported_kg,
                self.rpc_origin_waste,
                self.transport_factors,
                self.settings.country_code,
                audit,
            )

        process_emissions = compute_process_impacts(reduced.process_amounts, self.process_factors, audit)
        packaging_emissions = compute_packaging_impacts(
            reduced.packaging_amounts, self.tables.packaging_emission_factors, audit
        )

        return ImpactsTuple(
            rpc_footprints=rpc_footprints,
            process_emissions=process_emissions,
            packaging_emissions=packaging_emissions,
            transport_emissions=transport_emissions,
            gaps=list(audit.gaps),
        )

    def aggregate(self, impacts: ImpactsTuple) -> np.ndarray:
        return aggregate_impacts(*impacts)

    def aggregate_by_category(self, impacts: ImpactsTuple) -> Dict[str, np.ndarray]:
        return aggregate_impacts_by_category(*impacts)

    def amounts_per_origin(self, diet: Diet, with_waste: bool = True) -> Dict[str, float]:
        """Grams of RPCs coming from each origin country."""
        audit = CalculationAudit()
        reduced = self.reduce_diet(diet, with_waste, audit)
        return aggregate_amounts_per_origin(
            reduced.rpc_amounts, self.rpc_origin_waste, self.settings.country_code, audit
        )
