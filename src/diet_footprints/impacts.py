"""
Combines RPC, process, packaging and transport impacts into the canonical
output vector (see AGGREGATE_HEADERS):

  [5 totals, 16 raw-material indicators, 4 process, 4 packaging, 4 transport]

Process, packaging and transport vectors hold plain GHG masses; their CO2e
subtotals are computed here with CO2E_CONV_FACTORS.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .constants import (
    AGGREGATE_HEADERS, CO2E_CONV_FACTORS, N_ENV_IMPACTS, N_PACKAGING_GHGS,
    N_PROCESS_GHGS, N_TRANSPORT_GHGS, PACKAGING_GHGS, PROCESS_GHGS, TRANSPORT_GHGS
)
from .exceptions import VectorLengthError
from .models import NestedVectors
from .utils.calculations import as_vector, pad_vector, vectors_sum
from .utils.codes import get_code_subset


def to_co2e(emissions: Sequence[float], ghgs: Sequence[str]) -> float:
    """Sum of GHG masses weighted by their global warming potential."""
    return float(sum(emissions[i] * CO2E_CONV_FACTORS[ghg] for i, ghg in enumerate(ghgs)))


def expanded_impacts(
    rpc_footprints: Sequence[float],
    process_emissions: Sequence[float],
    packaging_emissions: Sequence[float],
    transport_emissions: Sequence[float]
) -> np.ndarray:
    rpc = as_vector(rpc_footprints, N_ENV_IMPACTS)
    process = as_vector(process_emissions, N_PROCESS_GHGS)
    packaging = as_vector(packaging_emissions, N_PACKAGING_GHGS)
    transport = as_vector(transport_emissions, N_TRANSPORT_GHGS)

    process_co2e = to_co2e(process, PROCESS_GHGS)
    packaging_co2e = to_co2e(packaging, PACKAGING_GHGS)
    transport_co2e = to_co2e(transport, TRANSPORT_GHGS)

    totals = [
        rpc[0] + process_co2e + packaging_co2e + transport_co2e,  # CO2e
        rpc[1] + process[0] + packaging[0] + transport[0],  # CO2
        rpc[2] + process[1] + packaging[1] + transport[1],  # CH4 fossil
        rpc[3] + packaging[2],  # CH4 biogenic
        rpc[4] + process[2] + transport[2],  # N2O
    ]

    expanded = np.concatenate([
        totals,
        rpc,
        [process_co2e], process,
        [packaging_co2e], packaging,
        [transport_co2e], transport,
    ])
    if expanded.shape[0] != len(AGGREGATE_HEADERS):
        raise VectorLengthError(
            f"Aggregate vector has {expanded.shape[0]} fields, header has {len(AGGREGATE_HEADERS)}"
        )
    return expanded


def _nested_values(nested: NestedVectors) -> List[np.ndarray]:
    return [vec for per_code in nested.values() for vec in per_code.values()]


def _present(vectors: Iterable[Optional[Sequence[float]]]) -> List[Sequence[float]]:
    return [vec for vec in vectors if vec is not None]


def aggregate_impacts(
    rpc_footprints: Mapping[str, Optional[Sequence[float]]],
    process_emissions: NestedVectors,
    packaging_emissions: NestedVectors,
    transport_emissions: Mapping[str, Optional[Sequence[float]]]
) -> np.ndarray:
    """
    Sum every collection to one vector and expand into the output order.
    Missing (None) entries contribute nothing; short GHG vectors are zero-padded.
    """
    total_rpc = vectors_sum(_present(rpc_footprints.values()), N_ENV_IMPACTS)
    total_process = vectors_sum(
        (pad_vector(v, N_PROCESS_GHGS) for v in _nested_values(process_emissions)), N_PROCESS_GHGS
    )
    total_packaging = vectors_sum(
        (pad_vector(v, N_PACKAGING_GHGS) for v in _nested_values(packaging_emissions)), N_PACKAGING_GHGS
    )
    total_transport = vectors_sum(
        (pad_vector(v, N_TRANSPORT_GHGS) for v in _present(transport_emissions.values())), N_TRANSPORT_GHGS
    )
    return expanded_impacts(total_rpc, total_process, total_packaging, total_transport)


def aggregate_impacts_by_category(
    rpc_footprints: Mapping[str, Optional[Sequence[float]]],
    process_emissions: NestedVectors,
    packaging_emissions: NestedVectors,
    transport_emissions: Mapping[str, Optional[Sequence[float]]]
) -> Dict[str, np.ndarray]:
    """
    Aggregate output vector per L1 category, sorted by category code.
    RPC and transport entries are assigned by their own L1 prefix.
    """
    def l1_of(code: str) -> str:
        return get_code_subset(code, 1, normalize=True)

    rpc_present = {code: vec for code, vec in rpc_footprints.items() if vec is not None}
    transport_present = {code: vec for code, vec in transport_emissions.items() if vec is not None}

    l1_codes = sorted(
        {l1_of(code) for code in rpc_present}
        | set(process_emissions)
        | set(packaging_emissions)
        | {l1_of(code) for code in transport_present}
    )

    return {
        l1_code: aggregate_impacts(
            {code: vec for code, vec in rpc_present.items() if l1_of(code) == l1_code},
            {l1_code: process_emissions.get(l1_code, {})},
            {l1_code: packaging_emissions.get(l1_code, {})},
            {code: vec for code, vec in transport_present.items() if l1_of(code) == l1_code},
        )
        for l1_code in l1_codes
    }
