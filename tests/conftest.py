import pytest

from diet_footprints.constants import N_ENV_IMPACTS
from diet_footprints.engine import ResultsEngineBuilder


def const_env_factors(x):
    return [x] * N_ENV_IMPACTS


def make_tables():
    """
    A pizza-like product (A.19.01.002) made of a flour RPC and a tomato RPC.
    The tomato step is transport-less (water uptake) and doubles its mass.
    """
    return {
        "recipes": {
            "A.19.01.002": [
                ["A.01.02.001", ["F28.BAKE"], 0.6, 1.0],
                ["A.02.01.001", ["F28.A07KD"], 0.4, 2.0],
            ],
        },
        "waste": {"A.19.01": [0.1, 0.0]},
        "rpc_origin_waste": {
            "A.01.02.001": {"SE": [0.5, 0.0], "DE": [0.5, 0.0]},
            "A.02.01.001": {"RoW": [1.0, 0.2]},
        },
        "footprints_by_origin": {
            "A.01.02.001": {"SE": const_env_factors(1.0), "DE": const_env_factors(3.0)},
            "A.02.01.001": {"RoW": const_env_factors(2.0)},
        },
        "process_energy_demands": {
            "F28.BAKE": [1, 0, 0, 0, 0, 0, 0, 0, 0],
            "F28.OVEN": [0, 0, 2, 0, 0, 0, 0, 0, 0],
            "F28.A07KD": [0, 0, 0, 0, 0, 0, 0, 0, 0],
        },
        "carrier_ghg_factors": {
            "Electricity": {"SE": [0.1, 0.01, 0.001]},
            "Natural gas": [0.05, 0.001, 0.0001],
        },
        "packaging_emission_factors": {"P3": [1.0, 0.01, 0.02]},
        "transport_emission_factors": {
            "SE": {"SE": [0.01, 0.0001, 0.00001], "DE": [0.05, 0.0002, 0.00002]},
        },
        "preparation_processes": {"A.19.01.002": ["F28.OVEN", "P3"]},
        "packaging_codes": {"A.19.01": "P3"},
        "names": {
            "A.19.01.002": "Pizza",
            "A.19": "Composite dishes",
            "A.19.01": "Pizza and similar",
            "A.01.02.001": "Wheat flour",
            "A.02.01.001": "Tomatoes",
        },
    }


def make_builder(tables=None):
    tables = tables or make_tables()
    return (
        ResultsEngineBuilder()
        .set_recipes(tables["recipes"])
        .set_waste(tables["waste"])
        .set_rpc_origin_waste(tables["rpc_origin_waste"])
        .set_footprints_by_origin(tables["footprints_by_origin"])
        .set_process_energy_demands(tables["process_energy_demands"])
        .set_carrier_ghg_factors(tables["carrier_ghg_factors"])
        .set_packaging_emission_factors(tables["packaging_emission_factors"])
        .set_transport_emission_factors(tables["transport_emission_factors"])
        .set_preparation_processes(tables["preparation_processes"])
        .set_packaging_codes(tables["packaging_codes"])
        .set_settings(country_code="SE", row_threshold=0.01)
    )


@pytest.fixture
def tables():
    return make_tables()


@pytest.fixture
def builder(tables):
    return make_builder(tables)


@pytest.fixture
def engine(builder):
    return builder.build()
