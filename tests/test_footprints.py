import numpy as np
import pytest

from diet_footprints.audit import CalculationAudit
from diet_footprints.constants import N_ENV_IMPACTS
from diet_footprints.exceptions import VectorLengthError
from diet_footprints.footprints import flatten_rpc_footprints


def const_env_factors(x):
    return [x] * N_ENV_IMPACTS


def test_flattens_origins_by_share_and_waste():
    rpc_factors = {
        "a": {"se": [0.2, 0.1], "es": [0.5, 0.15], "RoW": [0.3, 0.2]},
        "b": {"en": [0.5, 0], "fr": [0.4, 0.15], "RoW": [0.1, 0.2]},
    }
    footprints = {
        "a": {"se": const_env_factors(1), "es": const_env_factors(3), "RoW": const_env_factors(8)},
        "b": {"en": const_env_factors(1), "fr": const_env_factors(4), "RoW": const_env_factors(10)},
    }

    result = flatten_rpc_footprints(footprints, rpc_factors)

    assert set(result) == {"a", "b"}
    assert result["a"].shape == (N_ENV_IMPACTS,)
    np.testing.assert_allclose(
        result["a"], const_env_factors(0.2 * 1 / 0.9 + 0.5 * 3 / 0.85 + 0.3 * 8 / 0.8)
    )
    np.testing.assert_allclose(
        result["b"], const_env_factors(0.5 * 1 / 1.0 + 0.4 * 4 / 0.85 + 0.1 * 10 / 0.8)
    )


def test_single_origin_without_waste_is_unchanged():
    raw = list(np.linspace(0.5, 8, N_ENV_IMPACTS))

    result = flatten_rpc_footprints({"a": {"se": raw}}, {"a": {"se": [1, 0]}})

    np.testing.assert_array_equal(result["a"], raw)


def test_origin_without_footprint_falls_back_to_row():
    audit = CalculationAudit()

    result = flatten_rpc_footprints(
        {"a": {"se": const_env_factors(1), "RoW": const_env_factors(5)}},
        {"a": {"se": [0.5, 0], "dk": [0.25, 0], "RoW": [0.25, 0]}},
        audit,
    )

    np.testing.assert_allclose(result["a"], const_env_factors(0.5 * 1 + 0.25 * 5 + 0.25 * 5))
    assert [(g.kind, g.code) for g in audit.gaps] == [("origin_footprint_fallback", "a")]


def test_rpc_without_row_fallback_is_omitted():
    audit = CalculationAudit()

    result = flatten_rpc_footprints(
        {"a": {"se": const_env_factors(1)}},
        {"a": {"se": [0.5, 0], "dk": [0.5, 0]}},
        audit,
    )

    assert result == {}
    assert audit.gaps_of_kind("missing_footprint")[0].code == "a"


def test_rpc_without_origin_shares_is_omitted():
    audit = CalculationAudit()

    result = flatten_rpc_footprints({"a": {"se": const_env_factors(1)}}, {}, audit)

    assert result == {}
    assert audit.gaps_of_kind("missing_origin_waste")[0].code == "a"


def test_short_footprint_vector_is_rejected():
    with pytest.raises(VectorLengthError):
        flatten_rpc_footprints({"a": {"se": [1, 2, 3]}}, {"a": {"se": [1, 0]}})
