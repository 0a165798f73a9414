"""
Process and packaging GHG emissions.

Processes are costed through their energy demand per carrier (MJ/kg) and the
GHG intensity of each carrier; packaging through direct per-kg factors.
"""
import logging
from typing import Dict, List, Mapping, Optional

import numpy as np

from .audit import CalculationAudit, record_gap
from .constants import CARRIER_ORDER, COUNTRY_DEPENDENT_CARRIERS, N_PACKAGING_GHGS, N_PROCESS_GHGS
from .exceptions import ConfigurationError, MissingCarrierFactorError, VectorLengthError
from .models import CarrierFactors, NestedAmounts, NestedVectors
from .utils.calculations import pad_vector

logger = logging.getLogger(__name__)


def _carrier_factor(carrier: str, country_code: str, carrier_factors: CarrierFactors) -> Optional[List[float]]:
    factors = carrier_factors.get(carrier)
    if factors is None:
        return None
    if carrier in COUNTRY_DEPENDENT_CARRIERS:
        if not isinstance(factors, Mapping):
            logger.error(f"Carrier {carrier} needs factors per country code.")
            raise ConfigurationError(
                f"Factors of {carrier} must be given per country code",
                context={"carrier": carrier},
            )
        return factors.get(country_code)
    if isinstance(factors, Mapping):
        logger.error(f"Carrier {carrier} has per-country factors but is not country dependent.")
        raise ConfigurationError(
            f"Factors of {carrier} must be a single vector, not per country",
            context={"carrier": carrier},
        )
    return factors


def get_process_env_factors(
    country_code: str,
    process_energy_demands: Mapping[str, List[float]],
    carrier_factors: CarrierFactors
) -> Dict[str, np.ndarray]:
    """
    GHGs per kg ([CO2, CH4 fossil, N2O]) of every process, for one country.

    Carriers with zero demand are not looked up. A used carrier without a
    factor raises MissingCarrierFactorError; malformed rows raise
    VectorLengthError or ConfigurationError.
    """
    result: Dict[str, np.ndarray] = {}

    for process_code, demand_per_carrier in process_energy_demands.items():
        if len(demand_per_carrier) > len(CARRIER_ORDER):
            logger.error(f"Energy demand row of {process_code} is too long.")
            raise VectorLengthError(
                f"Energy demand of {process_code} lists {len(demand_per_carrier)} carriers, "
                f"expected at most {len(CARRIER_ORDER)}",
                context={"expected": len(CARRIER_ORDER), "actual": len(demand_per_carrier)},
            )
        factors = np.zeros(N_PROCESS_GHGS)
        for carrier_idx, mj_per_kg in enumerate(demand_per_carrier):
            if mj_per_kg == 0:
                continue

            carrier = CARRIER_ORDER[carrier_idx]
            ghgs_per_mj = _carrier_factor(carrier, country_code, carrier_factors)
            if ghgs_per_mj is None:
                logger.error(
                    f"Process {process_code} uses {carrier} but no factor exists for country {country_code}."
                )
                raise MissingCarrierFactorError(carrier, country_code, process_code)

            factors += pad_vector(ghgs_per_mj, N_PROCESS_GHGS) * mj_per_kg

        result[process_code] = factors

    return result


def compute_process_impacts(
    process_amounts: NestedAmounts,
    process_factors: Mapping[str, np.ndarray],
    audit: Optional[CalculationAudit] = None
) -> NestedVectors:
    """
    Emissions per L1 category and process: factor * grams / 1000.
    Processes without factors are left out and recorded as gaps.
    """
    impacts: NestedVectors = {}
    for l1_code, amounts in process_amounts.items():
        category: Dict[str, np.ndarray] = {}
        for process_code, amount_g in amounts.items():
            factor = process_factors.get(process_code)
            if factor is None:
                record_gap(audit, "missing_process_factor", process_code, f"in category {l1_code}")
                continue
            category[process_code] = pad_vector(factor, N_PROCESS_GHGS) * amount_g / 1000
        impacts[l1_code] = category
    return impacts


def compute_packaging_impacts(
    packaging_amounts: NestedAmounts,
    packaging_factors: Mapping[str, List[float]],
    audit: Optional[CalculationAudit] = None
) -> NestedVectors:
    """
    Emissions per L1 category and packaging code ([CO2, CH4 fossil, CH4 biogenic]).
    Short factors are zero-padded.
    """
    impacts: NestedVectors = {}
    for l1_code, amounts in packaging_amounts.items():
        category: Dict[str, np.ndarray] = {}
        for packaging_code, amount_g in amounts.items():
            factor = packaging_factors.get(packaging_code)
            if factor is None:
                record_gap(audit, "missing_packaging_factor", packaging_code, f"in category {l1_code}")
                continue
            emissions = pad_vector(factor, N_PACKAGING_GHGS) * amount_g / 1000
            if audit is not None:
                audit.log_calculation(
                    context=f"Packaging: {l1_code} {packaging_code}",
                    formula="Amount / 1000 * PackagingFactor",
                    variables={"Amount": amount_g, "PackagingFactor": list(factor)},
                    result=emissions,
                    unit="kg",
                )
            category[packaging_code] = emissions
        impacts[l1_code] = category
    return impacts
