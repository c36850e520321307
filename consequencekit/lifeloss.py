"""Life loss estimates for people remaining in structures during a flood."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional

from .hazards import HazardEvent, Parameter
from .results import Result
from .stability import (
    RESC_DAM_MASONRY_CONCRETE_BRICK,
    RESC_DAM_WOOD_ANCHORED,
    RESC_DAM_WOOD_UNANCHORED,
    Stability,
    StabilityCriteria,
)
from .statistics import PairedData
from .structures import PopulationSet, StructureDeterministic
from .warning import WarningResponseSystem


class LethalityZone(IntEnum):
    """The lethality regime a person is exposed to."""

    LOW = 1
    HIGH = 2


class Mobility(IntEnum):
    """Whether a person can move to safety within a structure."""

    UNKNOWN = 0
    MOBILE = 1
    NOT_MOBILE = 2


_LOW_FREQUENCIES = (
    0.0, 0.000003213863, 0.000006427726, 0.000009641590, 0.000012855450,
    0.000016069320, 0.000019283180, 0.000022497040, 0.000025710910, 1.0,
)
_LOW_RATES = (1.0, 1.0, 1.0, 0.5, 0.5, 0.2, 0.1428571, 0.04, 0.0, 0.0)

_HIGH_FREQUENCIES = (
    0.0, 0.007246377, 0.01449275, 0.02173913, 0.02898551, 0.03623188, 0.04347826,
    0.05072464, 0.05797102, 0.06521739, 0.07246377, 0.07971015, 0.08695652, 0.0942029,
    0.1014493, 0.1086956, 0.115942, 0.1231884, 0.1304348, 0.1376812, 0.1449275,
    0.1521739, 0.1594203, 0.1666667, 0.173913, 0.1811594, 0.1884058, 0.1956522,
    0.2028985, 0.2101449, 0.2173913, 0.2246377, 0.2318841, 0.2391304, 0.2463768,
    0.2536232, 0.2608696, 0.2681159, 0.2753623, 0.2826087, 0.2898551, 0.2971014,
    0.3043478, 0.3115942, 0.3188406, 0.326087, 0.3333333, 0.3405797, 0.3478261,
    0.3550725, 0.3623188, 0.3695652, 0.3768116, 0.384058, 0.3913043, 0.3985507,
    0.4057971, 0.4130435, 0.4202898, 0.4275362, 0.4347826, 0.442029, 0.4492754,
    0.4565217, 0.4637681, 0.4710145, 0.4782609, 0.4855072, 0.4927536, 0.5, 0.5072464,
    0.5144928, 0.5217391, 0.5289855, 0.5362319, 0.5434783, 0.5507246, 0.557971,
    0.5652174, 0.5724638, 0.5797101, 0.5869565, 0.5942029, 0.6014493, 0.6086956,
    0.615942, 0.6231884, 0.6304348, 0.6376812, 0.6449276, 0.6521739, 0.6594203,
    0.6666667, 0.6739131, 0.6811594, 0.6884058, 0.6956522, 0.7028986, 0.7101449,
    0.7173913, 0.7246377, 0.7318841, 0.7391304, 0.7463768, 0.7536232, 0.7608696,
    0.7681159, 0.7753623, 0.7826087, 0.7898551, 0.7971014, 0.8043478, 0.8115942,
    0.8188406, 0.8260869, 0.8333333, 0.8405797, 0.8478261, 0.8550724, 0.8623188,
    0.8695652, 0.8768116, 0.884058, 0.8913044, 0.8985507, 0.9057971, 0.9130435,
    0.9202899, 0.9275362, 0.9347826, 0.942029, 0.9492754, 0.9565217, 0.9637681,
    0.9710145, 0.9782609, 0.9855072, 1.0,
)
# The high-lethality rates open with a run of 1.0 that covers every frequency
# before this tail.
_HIGH_RATE_TAIL = (
    0.975, 0.9708738, 0.96, 0.9565217, 0.9090909, 0.9, 0.8947368, 0.8571429, 0.8571429,
    0.8333333, 0.8235294, 0.8, 0.8, 0.8, 0.75, 0.75, 0.75, 0.75, 0.75, 0.6666667,
    0.6666667, 0.6666667, 0.6666667, 0.6666667, 0.5714286, 0.5714286, 0.55,
    *(0.5,) * 13,
    0.4285714, 0.4285714,
    *(0.3333333,) * 8,
    0.2857143, 0.2, 0.2, 0.2, 0.1666667,
    *(0.0,) * 17,
)
_HIGH_RATES = (1.0,) * (len(_HIGH_FREQUENCIES) - len(_HIGH_RATE_TAIL)) + _HIGH_RATE_TAIL

_MOBILE_PROBABILITY_OVER_65 = 0.75
_MOBILE_PROBABILITY_UNDER_65 = 0.98


@dataclass(frozen=True)
class LethalityCurve:
    """Fatality rates indexed by cumulative frequency."""

    data: PairedData

    def sample(self, rng: Optional[Any] = None) -> float:
        """Draw a fatality rate, using ``rng`` or the module generator."""
        draw = rng.random() if rng is not None else random.random()
        return self.data.sample_value(draw)


DEFAULT_LOW_LETHALITY = LethalityCurve(PairedData(_LOW_FREQUENCIES, _LOW_RATES))
DEFAULT_HIGH_LETHALITY = LethalityCurve(PairedData(_HIGH_FREQUENCIES, _HIGH_RATES))


def life_loss_header() -> list[str]:
    """The names of the values in a life loss result."""
    return ["ll_u65", "ll_o65", "ll_tot"]


def life_loss_default_results() -> list[int]:
    """The values of a life loss result with no fatalities."""
    return [0, 0, 0]


def _apply_lethality_rate(rate: float, population: int, rng: random.Random) -> int:
    return sum(1 for _ in range(population) if rng.random() < rate)


def _evaluate_mobility(population: PopulationSet, rng: random.Random) -> dict[Mobility, PopulationSet]:
    mobile = PopulationSet()
    not_mobile = PopulationSet()
    groups = (
        ("pop2amo65", _MOBILE_PROBABILITY_OVER_65),
        ("pop2amu65", _MOBILE_PROBABILITY_UNDER_65),
        ("pop2pmo65", _MOBILE_PROBABILITY_OVER_65),
        ("pop2pmu65", _MOBILE_PROBABILITY_UNDER_65),
    )
    for attribute, probability in groups:
        for _ in range(getattr(population, attribute)):
            target = mobile if rng.random() < probability else not_mobile
            setattr(target, attribute, getattr(target, attribute) + 1)
    return {Mobility.MOBILE: mobile, Mobility.NOT_MOBILE: not_mobile}


@dataclass
class LifeLossEngine:
    """Computes fatalities from a hazard, a structure and a warning system."""

    lethality_curves: dict[LethalityZone, LethalityCurve]
    stability_criteria: dict[str, StabilityCriteria]
    warning_system: WarningResponseSystem
    seed_generator: random.Random = field(default_factory=random.Random)

    @classmethod
    def create(cls, seed: int, warning_system: WarningResponseSystem) -> LifeLossEngine:
        """An engine with the default lethality curves and stability criteria."""
        return cls(
            lethality_curves={
                LethalityZone.HIGH: DEFAULT_HIGH_LETHALITY,
                LethalityZone.LOW: DEFAULT_LOW_LETHALITY,
            },
            stability_criteria={
                "woodunanchored": RESC_DAM_WOOD_UNANCHORED,
                "woodanchored": RESC_DAM_WOOD_ANCHORED,
                "masonryconcretebrick": RESC_DAM_MASONRY_CONCRETE_BRICK,
            },
            warning_system=warning_system,
            seed_generator=random.Random(seed),
        )

    def compute_life_loss(self, event: HazardEvent, structure: StructureDeterministic) -> Result:
        """Fatalities under and over 65, and their total."""
        rng = random.Random(self.seed_generator.getrandbits(63))
        remaining, _ = self.warning_system.warning_function()(structure, event)
        flowing = event.has(Parameter.DEPTH) and (
            event.has(Parameter.DV) or event.has(Parameter.VELOCITY)
        )
        if flowing:
            criteria = self._determine_stability(structure)
            if criteria.evaluate(event) == Stability.COLLAPSED:
                rate = self.lethality_curves[LethalityZone.HIGH].sample(rng)
                over = _apply_lethality_rate(rate, remaining.pop2amo65, rng)
                under = _apply_lethality_rate(rate, remaining.pop2amu65, rng)
                return Result(life_loss_header(), [under, over, under + over])
        return self._submergence(event, remaining, rng)

    def _submergence(
        self, event: HazardEvent, remaining: PopulationSet, rng: random.Random
    ) -> Result:
        if event.depth is None:
            raise ValueError("no depth to evaluate life loss")
        if event.depth < 0.0:
            return Result(life_loss_header(), life_loss_default_results())
        # Fatalities in submerged structures follow the high-lethality curve
        # whatever the mobility of the occupants.
        curve = self.lethality_curves[LethalityZone.HIGH]
        under = over = 0
        for group in _evaluate_mobility(remaining, rng).values():
            losses = self._life_loss_set(group, curve, rng)
            under += losses.pop2amu65
            over += losses.pop2amo65
        return Result(life_loss_header(), [under, over, under + over])

    @staticmethod
    def _life_loss_set(
        population: PopulationSet, curve: LethalityCurve, rng: random.Random
    ) -> PopulationSet:
        def losses(count: int) -> int:
            return sum(1 for _ in range(count) if curve.sample(rng) < rng.random())

        result = PopulationSet()
        result.pop2amo65 = losses(population.pop2amo65)
        result.pop2pmo65 = losses(population.pop2pmo65)
        result.pop2amu65 = losses(population.pop2amu65)
        result.pop2pmu65 = losses(population.pop2pmu65)
        return result

    def _determine_stability(self, structure: StructureDeterministic) -> StabilityCriteria:
        if structure.occ_type.name == "RES2":
            return self.stability_criteria["woodunanchored"]
        if structure.construction_type in ("M", "S"):
            return self.stability_criteria["masonryconcretebrick"]
        return self.stability_criteria["woodanchored"]