"""
Flattens per-origin RPC footprints into one footprint-per-kg vector per RPC,
weighting each origin by its share and inflating by its production waste.
"""
import logging
from typing import Dict, List, Mapping, Optional

import numpy as np

from .audit import CalculationAudit, record_gap
from .constants import N_ENV_IMPACTS, REST_OF_WORLD
from .models import RpcOriginWaste
from .utils.calculations import as_vector, vectors_sum

logger = logging.getLogger(__name__)


def flatten_rpc_footprint(
    rpc_code: str,
    footprints: Mapping[str, List[float]],
    origins: Mapping[str, List[float]],
    audit: Optional[CalculationAudit] = None
) -> Optional[np.ndarray]:
    """
    Sum of footprint[origin] * share / (1 - waste) over the origins of one RPC.

    Origins with a zero share are ignored. An origin without its own footprint
    uses the RoW footprint. When RoW is missing as well the RPC cannot be
    flattened and None is returned.
    """
    contributions = []
    for origin, factors in origins.items():
        share, waste = factors[0], factors[1]
        if share == 0:
            continue
        ratio = share * (1.0 / (1.0 - waste))

        footprint = footprints.get(origin)
        if footprint is None:
            footprint = footprints.get(REST_OF_WORLD)
            if footprint is None:
                record_gap(audit, "missing_footprint", rpc_code, f"no footprint for origin {origin} and no RoW fallback")
                return None
            if origin != REST_OF_WORLD:
                record_gap(audit, "origin_footprint_fallback", rpc_code, f"origin {origin} uses the RoW footprint")

        contributions.append(as_vector(footprint, N_ENV_IMPACTS) * ratio)

    return vectors_sum(contributions, N_ENV_IMPACTS)


def flatten_rpc_footprints(
    footprints_by_origin: Mapping[str, Mapping[str, List[float]]],
    rpc_origin_waste: RpcOriginWaste,
    audit: Optional[CalculationAudit] = None
) -> Dict[str, np.ndarray]:
    """
    Flattened footprint per kg for every RPC having both footprints and
    origin shares. RPCs missing either are left out; callers treat them as
    "no footprint".
    """
    flattened: Dict[str, np.ndarray] = {}

    for rpc_code, footprints in footprints_by_origin.items():
        origins = rpc_origin_waste.get(rpc_code)
        if not origins:
            record_gap(audit, "missing_origin_waste", rpc_code, "footprints given but no origin shares")
            continue

        vector = flatten_rpc_footprint(rpc_code, footprints, origins, audit)
        if vector is not None:
            flattened[rpc_code] = vector

    for rpc_code in rpc_origin_waste:
        if rpc_code not in footprints_by_origin:
            logger.debug(f"Origin shares given for {rpc_code} but no footprints.")

    return flattened
