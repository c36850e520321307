"""Summary statistics of the structures in a census area."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from .structures import StructureStochastic

_ASSET_TYPES = {
    "REL1": "Assembly",
    "AGR1": "Agriculture",
    "EDU1": "Education",
    "EDU2": "Education",
    "GOV1": "Government",
    "GOV2": "Government",
    "COM6": "Government",
    **{f"IND{i}": "Industrial" for i in range(1, 7)},
    **{f"COM{i}": "Commercial" for i in (1, 2, 3, 4, 5, 7, 8, 9, 10)},
}


class FipsProvider(Protocol):
    """Anything that yields the structures of a FIPS area."""

    def by_fips(self, fips: str) -> Iterable[Any]: ...


def asset_type(occupancy_name: str) -> str:
    """The asset category for an occupancy type name; anything unlisted is Residential."""
    return _ASSET_TYPES.get(occupancy_name, "Residential")


@dataclass
class Stats:
    """Counts, values and populations of the structures in an area."""

    total_count: int = 0
    total_value: float = 0.0
    count_by_category: dict[str, int] = field(default_factory=dict)
    value_by_category: dict[str, float] = field(default_factory=dict)
    total_res_pop_2am: int = 0
    working_res_pop_2am: int = 0
    non_residential_value: float = 0.0


def stats_by_fips(fips: str, provider: FipsProvider) -> Stats:
    """Summarise the stochastic structures ``provider`` returns for ``fips``."""
    stats = Stats()
    for structure in provider.by_fips(fips):
        if not isinstance(structure, StructureStochastic):
            continue
        value = structure.struct_val.central_tendency() + structure.cont_val.central_tendency()
        category = asset_type(structure.occ_type.name)
        stats.total_count += 1
        stats.total_value += value
        if category == "Residential":
            pop = structure.population
            stats.total_res_pop_2am += pop.pop2amo65 + pop.pop2amu65
            stats.working_res_pop_2am += pop.pop2amu65
        else:
            stats.non_residential_value += value
        stats.count_by_category[category] = stats.count_by_category.get(category, 0) + 1
        stats.value_by_category[category] = stats.value_by_category.get(category, 0.0) + value
    return stats