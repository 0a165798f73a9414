from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from .constants import DEFAULT_COUNTRY_CODE, ROW_THRESHOLD, GapKind

# (food code, grams per day)
FoodEntry = Tuple[str, float]
Diet = List[FoodEntry]

# Nested mapping: category/ancestor code -> facet or packaging code -> value
NestedAmounts = Dict[str, Dict[str, float]]
NestedVectors = Dict[str, Dict[str, np.ndarray]]

# RPC code -> origin code -> [share, production waste]
RpcOriginWaste = Dict[str, Dict[str, List[float]]]

# Carrier name -> [CO2, CH4, N2O], or for electricity country code -> [CO2, CH4, N2O]
CarrierFactors = Dict[str, Union[List[float], Dict[str, List[float]]]]


@dataclass(frozen=True)
class RecipeComponent:
    """
    One step of a recipe: the sub-component, the process facets applied while
    producing the parent from it, its share of the parent and the reverse yield.
    """
    code: str
    facets: Tuple[str, ...]
    share: float
    yield_factor: float

    @classmethod
    def from_row(cls, row) -> "RecipeComponent":
        """Build from the preprocessed [code, facets, share, yield] row layout."""
        if isinstance(row, RecipeComponent):
            return row
        code, facets, share, yield_factor = row
        # Empty facet strings show up in source data for "no process"
        return cls(
            code=code,
            facets=tuple(f for f in facets if f),
            share=float(share),
            yield_factor=float(yield_factor),
        )


Recipes = Dict[str, List[RecipeComponent]]


@dataclass(frozen=True)
class EngineSettings:
    """
    Per-engine settings:
    - country_code: consuming country; picks electricity factors and domestic transport
    - row_threshold: origins without footprint data below this share are folded into RoW
    """
    country_code: str = DEFAULT_COUNTRY_CODE
    row_threshold: float = ROW_THRESHOLD


@dataclass(frozen=True)
class ReferenceTables:
    """
    All reference data an engine computes from. Built once, never mutated.
    """
    recipes: Recipes
    waste: Dict[str, List[float]]
    rpc_origin_waste: RpcOriginWaste
    footprints_by_origin: Dict[str, Dict[str, List[float]]]
    process_energy_demands: Dict[str, List[float]]
    carrier_ghg_factors: CarrierFactors
    packaging_emission_factors: Dict[str, List[float]]
    # consuming country -> production country -> [CO2, CH4 fossil, N2O] per kg
    transport_emission_factors: Dict[str, Dict[str, List[float]]]
    preparation_processes: Dict[str, List[str]] = field(default_factory=dict)
    packaging_codes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DataGap:
    """
    A piece of missing reference data that was recovered from locally.
    """
    kind: GapKind
    code: str
    detail: str = ""


@dataclass
class ReducedDiet:
    """
    A diet reduced to raw primary commodities.
    - rpc_amounts: merged (RPC code, grams), in order of first occurrence
    - process_amounts: L1 category -> process facet -> grams
    - packaging_amounts: L1 category -> packaging code -> grams
    - transportless_amounts: RPC code -> grams added by transport-less processes
    """
    rpc_amounts: List[FoodEntry]
    process_amounts: NestedAmounts
    packaging_amounts: NestedAmounts
    transportless_amounts: Dict[str, float]

    def __iter__(self) -> Iterator:
        return iter((
            self.rpc_amounts,
            self.process_amounts,
            self.packaging_amounts,
            self.transportless_amounts,
        ))


@dataclass
class ImpactsTuple:
    """
    Result of one computation. Unpacks as
    (rpc_footprints, process_emissions, packaging_emissions, transport_emissions).

    A None vector marks an RPC without footprint or transport data; gaps lists
    every data gap met while computing.
    """
    rpc_footprints: Dict[str, Optional[np.ndarray]]
    process_emissions: NestedVectors
    packaging_emissions: NestedVectors
    transport_emissions: Dict[str, Optional[np.ndarray]]
    gaps: List[DataGap] = field(default_factory=list)

    def __iter__(self) -> Iterator:
        return iter((
            self.rpc_footprints,
            self.process_emissions,
            self.packaging_emissions,
            self.transport_emissions,
        ))

    @property
    def missing_rpcs(self) -> List[str]:
        """RPC codes that could not be costed."""
        return [code for code, vec in self.rpc_footprints.items() if vec is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing_rpcs
