"""Warning systems that reduce the population left in harm's way."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .hazards import HazardEvent
from .results import Result
from .structures import PopulationSet, StructureDeterministic

PopulationReductionFunction = Callable[
    [StructureDeterministic, HazardEvent], "tuple[PopulationSet, Result]"
]


class WarningResponseSystem(Protocol):
    """Anything that can hand out a population reduction function."""

    def warning_function(self) -> PopulationReductionFunction: ...


@dataclass
class ComplianceBasedWarningSystem:
    """Each person independently complies with a warning at a fixed rate."""

    seed: int
    compliance_rate: float
    _rng: random.Random = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def _remaining(self, count: int) -> int:
        return sum(1 for _ in range(count) if self._rng.random() > self.compliance_rate)

    def reduce_population(
        self, structure: StructureDeterministic, event: HazardEvent
    ) -> tuple[PopulationSet, Result]:
        """The population that did not comply, and a result recording it."""
        pop = structure.population
        am_o65 = self._remaining(pop.pop2amo65)
        am_u65 = self._remaining(pop.pop2amu65)
        pm_o65 = self._remaining(pop.pop2pmo65)
        pm_u65 = self._remaining(pop.pop2pmu65)
        remaining = PopulationSet(
            pop2pmo65=am_o65,
            pop2pmu65=am_u65,
            pop2amo65=pm_o65,
            pop2amu65=pm_u65,
        )
        result = Result(
            ["rem2amo65", "rem2amu65", "rem2pmo65", "rem2pmu65"],
            [am_o65, am_u65, pm_o65, pm_u65],
        )
        return remaining, result

    def warning_function(self) -> PopulationReductionFunction:
        return self.reduce_population