import pytest

from consequencekit.hazards import HazardEvent
from consequencekit.stability import (
    RESC_DAM_MASONRY_CONCRETE_BRICK,
    RESC_DAM_WOOD_ANCHORED,
    RESC_DAM_WOOD_UNANCHORED,
    Stability,
    StabilityCriteria,
)


def test_example_prints_stable():
    result = RESC_DAM_WOOD_UNANCHORED.evaluate(HazardEvent(dv=30, depth=100))
    assert str(result) == "Stable"


def test_unanchored_wood_stability():
    sc = RESC_DAM_WOOD_UNANCHORED
    assert sc.evaluate(HazardEvent(dv=30, depth=100)) is Stability.STABLE
    assert sc.evaluate(HazardEvent(dv=35, depth=100)) is Stability.COLLAPSED


def test_anchored_wood_stability():
    sc = RESC_DAM_WOOD_ANCHORED
    assert sc.evaluate(HazardEvent(dv=35, depth=100)) is Stability.STABLE
    assert sc.evaluate(HazardEvent(dv=75.4, depth=100)) is Stability.COLLAPSED


def test_concrete_masonry_steel_stability():
    sc = RESC_DAM_MASONRY_CONCRETE_BRICK
    assert sc.evaluate(HazardEvent(dv=35, depth=100)) is Stability.STABLE
    assert sc.evaluate(HazardEvent(dv=75.4, depth=10)) is Stability.COLLAPSED
    assert sc.evaluate(HazardEvent(dv=75.4, depth=20)) is Stability.STABLE


def test_explicit_velocity_is_used():
    sc = RESC_DAM_MASONRY_CONCRETE_BRICK
    event = HazardEvent(dv=75.4, depth=20, velocity=7.0)
    assert sc.evaluate(event) is Stability.COLLAPSED


def test_zero_depth_is_stable():
    assert RESC_DAM_WOOD_UNANCHORED.evaluate(HazardEvent(dv=50, depth=0)) is Stability.STABLE


def test_collapsed_string():
    result = RESC_DAM_WOOD_UNANCHORED.evaluate(HazardEvent(dv=35, depth=100))
    assert str(result) == "Collapsed"


def test_missing_dv_is_an_error():
    with pytest.raises(ValueError, match="no dv"):
        StabilityCriteria(0.0, 0.0, 1.0).evaluate(HazardEvent(depth=3.0))


def test_missing_depth_is_an_error():
    with pytest.raises(ValueError, match="no depth"):
        StabilityCriteria(0.0, 0.0, 1.0).evaluate(HazardEvent(dv=3.0))