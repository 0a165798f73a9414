import numpy as np
import pytest

from diet_footprints.audit import CalculationAudit
from diet_footprints.exceptions import VectorLengthError
from diet_footprints.utils.calculations import (
    as_vector, f3, pad_vector, partition, vectors_sum, weighted_arithmetic_mean
)
from diet_footprints.utils.codes import get_code_level, get_code_subset, normalize_code_family
from diet_footprints.waste import adjust_diet_for_waste, waste_change_factor


def test_code_levels_and_subsets():
    assert get_code_level("A.01") == 1
    assert get_code_level("A.01.02.003") == 3
    assert get_code_subset("A.01.02.003", 1) == "A.01"
    assert get_code_subset("A.01.02.003", 2) == "A.01.02"
    # Shallower codes come back whole
    assert get_code_subset("A.01", 3) == "A.01"


def test_i_codes_normalize_to_a_codes():
    assert normalize_code_family("I.19.01") == "A.19.01"
    assert normalize_code_family("A.19.01") == "A.19.01"
    assert get_code_subset("I.19.01.002.003", 3) == "I.19.01.002"
    assert get_code_subset("I.19.01.002.003", 3, normalize=True) == "A.19.01.002"


def test_vectors_sum_is_elementwise():
    total = vectors_sum([[1, 2, 3], [10, 20, 30], np.array([0.5, 0.5, 0.5])])
    np.testing.assert_allclose(total, [11.5, 22.5, 33.5])


def test_vectors_sum_empty_gives_zeros():
    np.testing.assert_allclose(vectors_sum([], 3), [0, 0, 0])


def test_vectors_sum_rejects_unequal_lengths():
    with pytest.raises(VectorLengthError):
        vectors_sum([[1, 2, 3], [1, 2]])


def test_as_vector_checks_expected_length():
    with pytest.raises(VectorLengthError) as exc_info:
        as_vector([1, 2, 3], 16)
    assert exc_info.value.context == {"expected": 16, "actual": 3}


def test_pad_vector():
    np.testing.assert_allclose(pad_vector([1, 2], 3), [1, 2, 0])
    with pytest.raises(VectorLengthError):
        pad_vector([1, 2, 3, 4], 3)


def test_weighted_arithmetic_mean():
    assert weighted_arithmetic_mean([(0.2, 0.1), (0.8, 0.2)]) == pytest.approx(0.18)
    assert weighted_arithmetic_mean([]) == 0
    assert weighted_arithmetic_mean([(0, 0.5)]) == 0


def test_partition_keeps_order():
    matching, rest = partition([1, 2, 3, 4, 5], lambda x: x % 2 == 0)
    assert matching == [2, 4]
    assert rest == [1, 3, 5]


def test_f3_uses_configured_decimals():
    assert f3(1.23456) == "1.235"


def test_waste_change_factor():
    assert waste_change_factor(0.1, 0.3) == pytest.approx(1 / (0.9 * 0.7))
    assert waste_change_factor(0, 0) == 1


def test_zero_waste_is_identity():
    diet = [("A.01.02.003", 100.0), ("A.02.01", 55.5), ("I.03.01.001", 3.0)]
    waste = {"A.01.02": [0, 0], "A.02.01": [0, 0], "A.03.01": [0, 0]}

    assert adjust_diet_for_waste(diet, waste) == diet


def test_waste_uses_normalized_l2_category():
    diet = [("I.01.02.003", 100.0)]
    waste = {"A.01.02": [0.1, 0.3]}

    [(code, amount)] = adjust_diet_for_waste(diet, waste)

    assert code == "I.01.02.003"
    assert amount == pytest.approx(100 / (0.9 * 0.7))


def test_waste_never_decreases_amounts():
    diet = [("A.01.01", 10.0), ("A.01.02", 20.0)]
    waste = {"A.01.01": [0.05, 0.0], "A.01.02": [0.0, 0.5]}

    for (_, before), (_, after) in zip(diet, adjust_diet_for_waste(diet, waste)):
        assert after >= before


def test_missing_waste_category_defaults_to_zero_and_is_recorded():
    audit = CalculationAudit()
    adjusted = adjust_diet_for_waste([("A.09.01.001", 42.0)], {}, audit)

    assert adjusted == [("A.09.01.001", 42.0)]
    assert [g.code for g in audit.gaps_of_kind("missing_waste_category")] == ["A.09.01"]
