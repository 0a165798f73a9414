from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

import numpy as np

from ..constants import DECIMALS
from ..exceptions import VectorLengthError

T = TypeVar("T")


def f3(x: float) -> str:
    """
    Format a float with a fixed number of decimal places (DECIMALS).
    """
    return f"{x:.{DECIMALS}f}"


def as_vector(values: Sequence[float], length: Optional[int] = None) -> np.ndarray:
    """
    Convert to a 1-D float array, checking the length when one is expected.
    """
    vec = np.asarray(values, dtype=float)
    if vec.ndim != 1:
        raise VectorLengthError(f"Expected a 1-D vector, got shape {vec.shape}")
    if length is not None and vec.shape[0] != length:
        raise VectorLengthError(
            f"Expected a vector of length {length}, got {vec.shape[0]}",
            context={"expected": length, "actual": vec.shape[0]},
        )
    return vec


def pad_vector(values: Sequence[float], length: int) -> np.ndarray:
    """
    Zero-pad a short vector to `length`. Longer vectors are an error.
    """
    vec = as_vector(values)
    if vec.shape[0] > length:
        raise VectorLengthError(
            f"Vector of length {vec.shape[0]} exceeds canonical length {length}",
            context={"expected": length, "actual": vec.shape[0]},
        )
    if vec.shape[0] == length:
        return vec
    return np.concatenate([vec, np.zeros(length - vec.shape[0])])


def vectors_sum(vectors: Iterable[Sequence[float]], length: Optional[int] = None) -> np.ndarray:
    """
    Element-wise sum of index-aligned vectors.
    An empty input gives zeros of `length` (or an empty vector when no length is given).
    Unequal lengths raise VectorLengthError instead of broadcasting.
    """
    total: Optional[np.ndarray] = None
    for values in vectors:
        vec = as_vector(values, length)
        if total is None:
            total = vec.copy()
            continue
        if vec.shape != total.shape:
            raise VectorLengthError(
                f"Cannot sum vectors of length {total.shape[0]} and {vec.shape[0]}",
                context={"expected": total.shape[0], "actual": vec.shape[0]},
            )
        total += vec

    if total is None:
        return np.zeros(length or 0)
    return total


def weighted_arithmetic_mean(pairs: Iterable[Tuple[float, float]]) -> float:
    """
    Weighted mean of (weight, value) pairs. Zero total weight gives 0.
    """
    pairs = list(pairs)
    total_weight = sum(w for w, _ in pairs)
    if total_weight == 0:
        return 0.0
    return sum(w * v for w, v in pairs) / total_weight


def partition(items: Iterable[T], predicate: Callable[[T], bool]) -> Tuple[List[T], List[T]]:
    """
    Split into (items fulfilling predicate, the rest), keeping order.
    """
    matching: List[T] = []
    rest: List[T] = []
    for item in items:
        (matching if predicate(item) else rest).append(item)
    return matching, rest
