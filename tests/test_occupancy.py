import json

import pytest

from consequencekit.hazards import HazardEvent, Parameter
from consequencekit.occupancy import (
    DamageFunction,
    DamageFunctionFamily,
    DamageFunctionFamilyStochastic,
    DamageFunctionStochastic,
    JsonOccupancyTypeProvider,
    OccupancyTypeDeterministic,
    OccupancyTypesContainer,
    OccupancyTypeStochastic,
)
from consequencekit.statistics import (
    DeterministicDistribution,
    PairedData,
    TriangularDistribution,
    UncertaintyPairedData,
)


def _deterministic_stochastic(source="fabricated"):
    pd = UncertaintyPairedData(
        (1.0, 2.0, 3.0, 4.0),
        tuple(DeterministicDistribution(v) for v in (10.0, 20.0, 30.0, 40.0)),
    )
    return DamageFunctionStochastic(source, Parameter.DEPTH, pd)


def _erosion_damage_function():
    x = (10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0, 90.0, 100.0)
    y = (
        TriangularDistribution(0.0, 0.0, 0.5),
        TriangularDistribution(0.5, 1.0, 2.25),
        TriangularDistribution(0.5, 1.75, 4.5),
        TriangularDistribution(0.5, 4.7, 5.5),
        TriangularDistribution(0.75, 4.8, 6.5),
        TriangularDistribution(0.75, 5.0, 8.0),
        TriangularDistribution(0.75, 7.25, 9.0),
        TriangularDistribution(1.0, 7.85, 10.0),
        TriangularDistribution(2.0, 8.0, 11.0),
        TriangularDistribution(3.5, 8.0, 11.0),
    )
    return DamageFunctionStochastic(
        "NACCS Coastal Erosion Contents Curve bhrercn",
        Parameter.EROSION,
        UncertaintyPairedData(x, y),
    )


def _occtype(name, source="fabricated", key=Parameter.DEFAULT):
    family = DamageFunctionFamilyStochastic({key: _deterministic_stochastic(source)})
    return OccupancyTypeStochastic(name, {"structure": family})


def test_damage_function_family_selects_by_hazard_parameters():
    cep = Parameter.DEPTH | Parameter.SALINITY | Parameter.WAVE_HEIGHT | Parameter.HIGH_WAVE_HEIGHT
    dep = Parameter.DEPTH
    ce2p = Parameter.DEPTH | Parameter.WAVE_HEIGHT | Parameter.HIGH_WAVE_HEIGHT
    family = DamageFunctionFamily(
        {
            cep: DamageFunction("coastal", Parameter.DEPTH, PairedData((1, 2, 3), (1, 2, 3))),
            dep: DamageFunction("depth", Parameter.DEPTH, PairedData((1, 2, 3), (2, 4, 6))),
            ce2p: DamageFunction("coastal no salinity", Parameter.DEPTH, PairedData((1, 2, 3), (3, 6, 9))),
        }
    )
    ce = HazardEvent(depth=2, salinity=True, wave_height=3.4)
    de = HazardEvent(depth=2)
    ce2 = HazardEvent(depth=2, salinity=False, wave_height=3.4)
    assert family.damage_functions[ce.parameters()].damage_function.sample_value(ce.depth) == 2
    assert family.damage_functions[de.parameters()].damage_function.sample_value(de.depth) == 4
    assert family.damage_functions[ce2.parameters()].damage_function.sample_value(ce2.depth) == 6


def test_damage_function_round_trip():
    df = DamageFunction(
        "created for testing marshaling", Parameter.DEPTH, PairedData((1, 2, 3), (2, 4, 6))
    )
    data = json.loads(json.dumps(df.to_dict()))
    assert data["source"] == "created for testing marshaling"
    assert DamageFunction.from_dict(data) == df


def test_damage_function_stochastic_round_trip():
    df = _deterministic_stochastic()
    back = DamageFunctionStochastic.from_dict(json.loads(json.dumps(df.to_dict())))
    assert back == df
    assert isinstance(back.damage_function, UncertaintyPairedData)


def test_erosion_damage_function_round_trip():
    df = _erosion_damage_function()
    back = DamageFunctionStochastic.from_dict(json.loads(json.dumps(df.to_dict())))
    assert back.damage_driver == Parameter.EROSION
    assert back.damage_function == df.damage_function


def test_damage_function_family_stochastic_round_trip():
    df = _deterministic_stochastic()
    family = DamageFunctionFamilyStochastic(
        {
            Parameter.DEFAULT: df,
            Parameter.DEPTH: df,
            Parameter.DEPTH | Parameter.ARRIVAL_TIME: df,
        }
    )
    back = DamageFunctionFamilyStochastic.from_dict(json.loads(json.dumps(family.to_dict())))
    assert back.damage_functions[Parameter.DEFAULT].source == "fabricated"
    assert set(back.damage_functions) == set(family.damage_functions)


def test_unknown_parameter_key_raises():
    with pytest.raises(ValueError):
        DamageFunctionFamily.from_dict({"damagefunctions": {"lava": {}}})


def test_occupancy_type_stochastic_round_trip():
    ot = _occtype("AGR1")
    back = OccupancyTypeStochastic.from_dict(json.loads(json.dumps(ot.to_dict())))
    assert back == ot
    assert back.component_damage_functions["structure"].damage_functions[Parameter.DEFAULT].source == "fabricated"


def test_central_tendency_uses_most_likely():
    family = DamageFunctionFamilyStochastic({Parameter.EROSION: _erosion_damage_function()})
    ot = OccupancyTypeStochastic("fake", {"contents": family})
    det = ot.central_tendency()
    curve = det.component_damage_functions["contents"].damage_functions[Parameter.EROSION].damage_function
    assert det.name == "fake"
    assert curve.yvals == (0.0, 1.0, 1.75, 4.7, 4.8, 5.0, 7.25, 7.85, 8.0, 8.0)


def test_sample_of_deterministic_distributions_is_exact():
    det = _occtype("test").sample(1234)
    curve = det.component_damage_functions["structure"].damage_functions[Parameter.DEFAULT].damage_function
    assert curve == PairedData((1.0, 2.0, 3.0, 4.0), (10.0, 20.0, 30.0, 40.0))


def test_sample_is_reproducible_and_monotonic():
    family = DamageFunctionFamilyStochastic({Parameter.EROSION: _erosion_damage_function()})
    ot = OccupancyTypeStochastic("fake", {"contents": family})
    first = ot.sample(1234)
    second = ot.sample(1234)
    assert first == second
    ys = first.component_damage_functions["contents"].damage_functions[Parameter.EROSION].damage_function.yvals
    assert list(ys) == sorted(ys)
    assert all(0.0 <= y <= 100.0 for y in ys)


def test_damage_function_for_hazard_falls_back_to_default():
    pd = PairedData((1, 2), (10, 20))
    default = DamageFunction("default", Parameter.DEPTH, pd)
    erosion = DamageFunction("erosion", Parameter.EROSION, pd)
    ot = OccupancyTypeDeterministic(
        "x",
        {"structure": DamageFunctionFamily({Parameter.DEFAULT: default, Parameter.EROSION: erosion})},
    )
    assert ot.damage_function_for_hazard("structure", HazardEvent(depth=1.0)).source == "default"
    assert ot.damage_function_for_hazard("structure", HazardEvent(erosion=3.0)).source == "erosion"
    with pytest.raises(KeyError):
        ot.damage_function_for_hazard("contents", HazardEvent(depth=1.0))


def test_extend_rejects_existing_names():
    container = OccupancyTypesContainer({"RES1": _occtype("RES1")})
    container.extend({"COM1": _occtype("COM1")})
    assert set(container.occupancy_types) == {"RES1", "COM1"}
    with pytest.raises(ValueError, match="already exists"):
        container.extend({"RES1": _occtype("RES1")})


def test_merge_adds_new_parameters_and_rejects_duplicates():
    container = OccupancyTypesContainer({"COM1": _occtype("COM1")})
    container.merge({"COM1": _occtype("COM1", "erosion", Parameter.EROSION)})
    functions = container.occupancy_types["COM1"].component_damage_functions["structure"].damage_functions
    assert set(functions) == {Parameter.DEFAULT, Parameter.EROSION}
    assert functions[Parameter.EROSION].source == "erosion"
    with pytest.raises(ValueError, match="already exists with parameter"):
        container.merge({"COM1": _occtype("COM1", "again", Parameter.EROSION)})


def test_override_replaces_and_rejects_missing():
    container = OccupancyTypesContainer({"COM1": _occtype("COM1")})
    container.override({"COM1": _occtype("COM1", "replacement")})
    functions = container.occupancy_types["COM1"].component_damage_functions["structure"].damage_functions
    assert functions[Parameter.DEFAULT].source == "replacement"
    with pytest.raises(ValueError, match="parameter"):
        container.override({"COM1": _occtype("COM1", "x", Parameter.EROSION)})
    with pytest.raises(ValueError, match="doesn't currently exist"):
        container.override({"RES9": _occtype("RES9")})


def test_report_lists_every_function():
    container = OccupancyTypesContainer({"COM1": _occtype("COM1")})
    lines = container.report().splitlines()
    assert lines[0] == "|occtype| componenttype| compoundhazard| damageDriver| source|"
    assert lines[1] == "|-----| -----| -----| -----| -----|"
    assert lines[2] == "|COM1| structure| default| depth| fabricated|"
    assert len(lines) == 3


def test_provider_write_and_read(tmp_path):
    provider = JsonOccupancyTypeProvider(
        OccupancyTypesContainer(
            {"COM1": _occtype("COM1", "erosion", Parameter.EROSION), "RES1": _occtype("RES1")}
        )
    )
    path = tmp_path / "occtypes.json"
    provider.write(path)
    loaded = JsonOccupancyTypeProvider.from_path(path)
    m = loaded.occupancy_type_map()
    assert m == provider.occupancy_type_map()
    assert (
        m["COM1"].component_damage_functions["structure"].damage_functions[Parameter.EROSION].source
        == "erosion"
    )
    assert loaded.path == str(path)


def test_provider_rejects_bad_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonOccupancyTypeProvider.from_path(path)


def test_provider_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonOccupancyTypeProvider.from_path(tmp_path / "absent.json")