"""
Reduces diet items to the raw primary commodities (RPCs) they are made of.

A code with a recipe is expanded depth-first into its components, each
weighted by share and reverse yield; a code without a recipe is an RPC.
Along the way the reducer accumulates:
  - process facet masses per L1 category (what each recipe step processes),
  - preparation processes of L3 categories,
  - mass added by transport-less processes, per RPC.
Packaging is recorded for the entry diet only.

Recursion state is threaded through return values: every call returns its
own Reduction, which the caller absorbs.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .constants import (
    PACKAGING_CODE_PREFIX, TRANSPORTLESS_PROCESSES, TRANSPORTLESS_PROCESS_EXCEPTION
)
from .exceptions import RecipeCycleError
from .models import Diet, FoodEntry, NestedAmounts, RecipeComponent, Recipes, ReducedDiet
from .utils.codes import get_code_level, get_code_subset

logger = logging.getLogger(__name__)


@dataclass
class Reduction:
    """
    Partial result of reducing one (code, amount) pair.
    """
    rpcs: List[FoodEntry] = field(default_factory=list)
    process_amounts: NestedAmounts = field(default_factory=dict)
    transportless_amounts: Dict[str, float] = field(default_factory=dict)

    def add_rpc(self, code: str, amount: float):
        self.rpcs.append((code, amount))

    def add_process(self, code: str, facet: str, amount: float):
        l1_code = get_code_subset(code, 1, normalize=True)
        facets = self.process_amounts.setdefault(l1_code, {})
        facets[facet] = facets.get(facet, 0.0) + amount

    def add_transportless(self, code: str, amount: float):
        self.transportless_amounts[code] = self.transportless_amounts.get(code, 0.0) + amount

    def absorb(self, other: "Reduction"):
        self.rpcs.extend(other.rpcs)
        for l1_code, facets in other.process_amounts.items():
            for facet, amount in facets.items():
                target = self.process_amounts.setdefault(l1_code, {})
                target[facet] = target.get(facet, 0.0) + amount
        for code, amount in other.transportless_amounts.items():
            self.add_transportless(code, amount)


def normalize_recipes(raw_recipes: Mapping[str, Iterable]) -> Recipes:
    """
    Convert preprocessed recipe rows ([code, facets, share, yield]) to RecipeComponents.
    """
    return {
        code: [RecipeComponent.from_row(row) for row in rows]
        for code, rows in raw_recipes.items()
    }


def is_packaging_code(code: str) -> bool:
    return code.startswith(PACKAGING_CODE_PREFIX)


def is_transportless_process(facets: Sequence[str]) -> bool:
    """
    True when a step includes a process adding mass that is not transported.
    Polished rice (exactly the exception pair) does not count.
    """
    if not facets:
        return False
    if (
        len(facets) == len(TRANSPORTLESS_PROCESS_EXCEPTION)
        and all(f in TRANSPORTLESS_PROCESS_EXCEPTION for f in facets)
    ):
        return False
    return any(f in TRANSPORTLESS_PROCESSES for f in facets)


def find_recipe_cycle(recipes: Recipes) -> Optional[List[str]]:
    """
    Return one cycle of the recipe graph as a list of codes, or None.
    Direct self-references are not cycles; they expand exactly one level.
    """
    visiting, done = set(), set()

    def visit(code: str, path: List[str]) -> Optional[List[str]]:
        visiting.add(code)
        path.append(code)
        for component in recipes.get(code, []):
            sub = component.code
            if sub == code or sub in done:
                continue
            if sub in visiting:
                return path[path.index(sub):] + [sub]
            cycle = visit(sub, path)
            if cycle:
                return cycle
        path.pop()
        visiting.discard(code)
        done.add(code)
        return None

    for code in recipes:
        if code not in done:
            cycle = visit(code, [])
            if cycle:
                return cycle
    return None


def validate_recipes(recipes: Recipes):
    """Raise RecipeCycleError if the recipe graph contains a cycle."""
    cycle = find_recipe_cycle(recipes)
    if cycle:
        logger.error(f"Recipe table contains a cycle: {' -> '.join(cycle)}")
        raise RecipeCycleError(cycle)


def _preparation_processes_for(
    code: str,
    preparation_processes: Mapping[str, List[str]],
    recorded_categories: FrozenSet[str]
) -> Tuple[Optional[str], List[str]]:
    """
    (L3 category, its non-packaging preparation processes) for a recipe code of
    level >= 3, unless that category was already recorded on this path.
    """
    if get_code_level(code) < 3:
        return None, []
    l3_code = get_code_subset(code, 3, normalize=True)
    if l3_code in recorded_categories:
        return None, []
    specials = [p for p in preparation_processes.get(l3_code, []) if not is_packaging_code(p)]
    return l3_code, specials


def reduce_to_rpcs(
    code: str,
    amount: float,
    recipes: Recipes,
    preparation_processes: Optional[Mapping[str, List[str]]] = None,
    path: Tuple[str, ...] = (),
    recorded_categories: FrozenSet[str] = frozenset(),
    transportless_amount: float = 0.0
) -> Reduction:
    """
    Reduce one food (code, grams) to its RPCs.

    - Every step contributes mass * share * yield, once per declared facet,
      under the L1 category of the parent code.
    - A component listing its own code is emitted as an RPC at that mass
      without being expanded again.
    - Any other revisit of a code already on the recursion path raises
      RecipeCycleError.
    """
    preparation_processes = preparation_processes or {}
    reduction = Reduction()

    components = recipes.get(code)
    if not components:
        reduction.add_rpc(code, amount)
        if transportless_amount != 0:
            reduction.add_transportless(code, transportless_amount)
        return reduction

    path = path + (code,)

    l3_code, specials = _preparation_processes_for(code, preparation_processes, recorded_categories)
    if specials:
        recorded_categories = recorded_categories | {l3_code}
        for special in specials:
            reduction.add_process(l3_code, special, amount)

    for component in components:
        sub_amount = amount * component.share * component.yield_factor

        for facet in component.facets:
            reduction.add_process(code, facet, sub_amount)

        sub_transportless = transportless_amount
        if is_transportless_process(component.facets):
            sub_transportless += sub_amount - amount * component.share

        if component.code == code:
            reduction.add_rpc(code, sub_amount)
            if sub_transportless != 0:
                reduction.add_transportless(code, sub_transportless)
            continue

        if component.code in path:
            cycle = list(path[path.index(component.code):]) + [component.code]
            logger.error(f"Cycle met while reducing {path[0]}: {' -> '.join(cycle)}")
            raise RecipeCycleError(cycle)

        reduction.absorb(reduce_to_rpcs(
            component.code,
            sub_amount,
            recipes,
            preparation_processes,
            path,
            recorded_categories,
            sub_transportless,
        ))

    return reduction


def merge_duplicate_rpcs(rpcs: Iterable[FoodEntry]) -> List[FoodEntry]:
    """
    Sum repeated RPC codes, keeping the order of first occurrence.
    """
    merged: Dict[str, float] = {}
    for code, amount in rpcs:
        merged[code] = merged.get(code, 0.0) + amount
    return list(merged.items())


def record_packaging(diet: Diet, packaging_codes: Mapping[str, str]) -> NestedAmounts:
    """
    Packaging mass per L1 category and packaging code, for the entry diet only.
    The most specific category of each code having a packaging code wins.
    """
    packaging_amounts: NestedAmounts = {}

    for code, amount in diet:
        packaging_code = None
        level = get_code_level(code)
        while not packaging_code and level > 0:
            packaging_code = packaging_codes.get(get_code_subset(code, level, normalize=True))
            level -= 1
        if not packaging_code:
            continue

        l1_code = get_code_subset(code, 1, normalize=True)
        amounts = packaging_amounts.setdefault(l1_code, {})
        amounts[packaging_code] = amounts.get(packaging_code, 0.0) + amount

    return packaging_amounts


def reduce_diet(
    diet: Diet,
    recipes: Recipes,
    preparation_processes: Optional[Mapping[str, List[str]]] = None,
    packaging_codes: Optional[Mapping[str, str]] = None
) -> ReducedDiet:
    """
    Reduce a whole diet to merged RPC amounts, process, packaging and
    transport-less amounts.
    """
    total = Reduction()
    for code, amount in diet:
        total.absorb(reduce_to_rpcs(code, amount, recipes, preparation_processes))

    return ReducedDiet(
        rpc_amounts=merge_duplicate_rpcs(total.rpcs),
        process_amounts=total.process_amounts,
        packaging_amounts=record_packaging(diet, packaging_codes or {}),
        transportless_amounts=total.transportless_amounts,
    )
