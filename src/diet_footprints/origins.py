"""
Origin handling per RPC: folding small or footprint-less origins into a single
Rest-of-World (RoW) origin, and distributing RPC masses over origins.
"""
import logging
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .audit import CalculationAudit, record_gap
from .constants import REST_OF_WORLD, SHARE_SUM_TOLERANCE
from .models import FoodEntry, RpcOriginWaste
from .utils.calculations import partition, weighted_arithmetic_mean

logger = logging.getLogger(__name__)

OriginEntry = Tuple[str, List[float]]


def _share_and_waste(entry: OriginEntry) -> Tuple[float, float]:
    factors = entry[1]
    return factors[0], factors[1]


def compute_rest_of_world_waste(kept: List[OriginEntry], folded: List[OriginEntry]) -> float:
    """
    Production waste of the RoW bucket, as a share-weighted mean:
      1. nothing folded: mean over the kept origins
      2. folded origins but no literal RoW among them: mean over all origins
      3. a literal RoW among the folded: mean over the folded only
    """
    if not folded:
        return weighted_arithmetic_mean(_share_and_waste(e) for e in kept)

    if all(origin != REST_OF_WORLD for origin, _ in folded):
        return weighted_arithmetic_mean(_share_and_waste(e) for e in folded + kept)

    return weighted_arithmetic_mean(_share_and_waste(e) for e in folded)


def aggregate_rest_of_world(
    origin_waste: RpcOriginWaste,
    origins_with_footprints: Mapping[str, Set[str]],
    row_threshold: float
) -> RpcOriginWaste:
    """
    Fold origins into RoW, per RPC.

    An origin is folded when it is literally RoW, or when it has no footprint
    data and a share below `row_threshold`. The kept origins are returned as
    they were, followed by RoW with share max(0, 1 - sum(kept shares)); a RoW share
    within SHARE_SUM_TOLERANCE of zero is set to 0.
    """
    if row_threshold < 0 or row_threshold > 1:
        raise ValueError(
            f"Unexpected RoW-threshold provided. Should be between 0-1, was {row_threshold}"
        )

    aggregated: RpcOriginWaste = {}
    for rpc_code, origins in origin_waste.items():
        with_footprints = origins_with_footprints.get(rpc_code, set())

        folded, kept = partition(
            origins.items(),
            lambda entry: entry[0] == REST_OF_WORLD
            or (entry[0] not in with_footprints and entry[1][0] < row_threshold),
        )

        kept_share = sum(factors[0] for _, factors in kept)
        row_share = max(0.0, 1.0 - kept_share)
        # Shares summing to 1 within rounding leave no RoW
        if row_share <= SHARE_SUM_TOLERANCE:
            row_share = 0.0
        row_waste = compute_rest_of_world_waste(kept, folded)

        result = {origin: [factors[0], factors[1]] for origin, factors in kept}
        result[REST_OF_WORLD] = [row_share, row_waste]
        aggregated[rpc_code] = result

        if kept_share > 1.0 + SHARE_SUM_TOLERANCE:
            logger.warning(
                f"Origin shares of {rpc_code} sum to {kept_share:.4f} without RoW; "
                "RoW share clamped to 0."
            )

    return aggregated


def origins_with_footprint_data(footprints_by_origin: Mapping[str, Mapping[str, object]]) -> Dict[str, Set[str]]:
    """RPC code -> origins that have a footprint vector."""
    return {code: set(per_origin) for code, per_origin in footprints_by_origin.items()}


def aggregate_amounts_per_origin(
    rpc_amounts: List[FoodEntry],
    origin_waste: RpcOriginWaste,
    default_country: str,
    audit: Optional[CalculationAudit] = None
) -> Dict[str, float]:
    """
    Total RPC mass per origin country.

    RoW shares are spread over the named origins; an RPC with only RoW data
    is attributed to `default_country`.
    """
    results: Dict[str, float] = {}

    for rpc_code, rpc_amount in rpc_amounts:
        origins = origin_waste.get(rpc_code)
        if not origins:
            record_gap(audit, "missing_origin_waste", rpc_code, "no origin shares")
            continue

        if list(origins) == [REST_OF_WORLD]:
            results[default_country] = results.get(default_country, 0.0) + rpc_amount
            continue

        row_multiplier = 1.0
        if REST_OF_WORLD in origins and origins[REST_OF_WORLD][0] < 1.0:
            row_multiplier = 1.0 / (1.0 - origins[REST_OF_WORLD][0])

        for origin, factors in origins.items():
            if origin == REST_OF_WORLD:
                continue
            results[origin] = results.get(origin, 0.0) + factors[0] * rpc_amount * row_multiplier

    return results
