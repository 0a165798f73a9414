import logging
from typing import Mapping, Optional, Sequence

import numpy as np

from .audit import CalculationAudit, record_gap
from .constants import N_TRANSPORT_GHGS, NULL_RPC_CODE, REST_OF_WORLD, TRANSPORT_EXCLUDED_PRODUCTS
from .models import RpcOriginWaste
from .utils.calculations import as_vector, vectors_sum

logger = logging.getLogger(__name__)


def compute_transport_emissions(
    rpc_code: str,
    amount: float,
    rpc_origin_waste: RpcOriginWaste,
    transport_factors: Mapping[str, Sequence[float]],
    country_code: str,
    audit: Optional[CalculationAudit] = None
) -> Optional[np.ndarray]:
    """
    Transport emissions ([CO2, CH4 fossil, N2O]) of `amount` of one RPC.

    `transport_factors` maps production country -> emissions per unit of
    amount for transport into `country_code`.

    - RoW-only RPCs use the computing country's own factor.
    - Otherwise the RoW share is spread over the named origins with
      multiplier 1 / (1 - RoW share); origins without a factor are skipped.
    - None when the code is empty, the null code or has no origin data.
    """
    if not rpc_code or rpc_code == NULL_RPC_CODE:
        return None

    if rpc_code in TRANSPORT_EXCLUDED_PRODUCTS:
        return np.zeros(N_TRANSPORT_GHGS)

    origins = rpc_origin_waste.get(rpc_code)
    if not origins:
        record_gap(audit, "missing_transport_origin", rpc_code, "no origin shares")
        return None

    row_share = origins[REST_OF_WORLD][0] if REST_OF_WORLD in origins else 0.0
    named = {origin: factors for origin, factors in origins.items() if origin != REST_OF_WORLD}

    if not named or row_share >= 1.0:
        factor = transport_factors.get(country_code)
        if factor is None:
            record_gap(audit, "missing_transport_factor", rpc_code, f"no domestic factor for {country_code}")
            return None
        return as_vector(factor, N_TRANSPORT_GHGS) * amount

    row_multiplier = 1.0 / (1.0 - row_share)

    contributions = []
    for origin, factors in named.items():
        if factors[0] == 0:
            continue
        factor = transport_factors.get(origin)
        if factor is None:
            logger.error(f"Transport emissions factors missing for origin {origin}. RPC code is {rpc_code}.")
            record_gap(audit, "missing_transport_factor", rpc_code, f"origin {origin} skipped")
            continue
        share = factors[0] * row_multiplier
        contributions.append(as_vector(factor, N_TRANSPORT_GHGS) * amount * share)

    emissions = vectors_sum(contributions, N_TRANSPORT_GHGS)
    if audit is not None:
        audit.log_calculation(
            context=f"Transport: {rpc_code}",
            formula="Sum(Amount * Share / (1 - RoWShare) * TransportFactor)",
            variables={"Amount": amount, "RoWShare": row_share, "Origins": list(named)},
            result=emissions,
        )
    return emissions
