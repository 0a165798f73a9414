from typing import Dict, List, Optional

from .audit import CalculationAudit, record_gap
from .models import Diet
from .utils.codes import get_code_subset


def waste_change_factor(retail_waste: float, consumer_waste: float) -> float:
    """
    Factor turning a consumed (net) amount into the pre-waste (gross) amount.
    """
    return 1.0 / ((1.0 - retail_waste) * (1.0 - consumer_waste))


def adjust_diet_for_waste(
    diet: Diet,
    waste: Dict[str, List[float]],
    audit: Optional[CalculationAudit] = None
) -> Diet:
    """
    Inflate each diet amount by the retail and consumer waste of its L2 category.

    Categories missing from the waste table count as zero waste. This is not
    an error; the gap is recorded and computation continues.
    """
    adjusted: Diet = []
    for code, amount in diet:
        l2_code = get_code_subset(code, 2, normalize=True)
        factors = waste.get(l2_code)
        if factors is None:
            record_gap(audit, "missing_waste_category", l2_code, f"no retail/consumer waste for {code}; assuming none")
            factors = [0.0, 0.0]

        retail_waste, consumer_waste = factors[0], factors[1]
        gross = amount * waste_change_factor(retail_waste, consumer_waste)

        if audit is not None:
            audit.log_calculation(
                context=f"Waste adjustment: {code}",
                formula="Amount / ((1 - RetailWaste) * (1 - ConsumerWaste))",
                variables={"Amount": amount, "RetailWaste": retail_waste, "ConsumerWaste": consumer_waste},
                result=gross,
                unit="g",
            )
        adjusted.append((code, gross))

    return adjusted
