"""Structures that can be damaged by a hazard, with or without uncertainty."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .foundation import FoundationUncertainty
from .hazards import HazardEvent, Parameter
from .occupancy import OccupancyTypeDeterministic, OccupancyTypeStochastic
from .results import ParameterValue, Result

RESULT_HEADERS = (
    "fd_id",
    "x",
    "y",
    "hazard",
    "damage category",
    "occupancy type",
    "structure damage",
    "content damage",
    "pop2amu65",
    "pop2amo65",
    "pop2pmu65",
    "pop2pmo65",
    "cbfips",
    "s_dam_per",
    "c_dam_per",
)


class Location(NamedTuple):
    """A point given by its x and y coordinates."""

    x: float
    y: float


@dataclass
class PopulationSet:
    """Population counts by time of day and age group."""

    pop2pmo65: int = 0
    pop2pmu65: int = 0
    pop2amo65: int = 0
    pop2amu65: int = 0


@dataclass
class BaseStructure:
    """A named structure with a location and a damage category."""

    name: str = ""
    dam_cat: str = ""
    cbfips: str = ""
    x: float = 0.0
    y: float = 0.0
    ground_elevation: float = 0.0

    def location(self) -> Location:
        return Location(self.x, self.y)


def _foundation_group(occupancy_name: str) -> str:
    if occupancy_name == "RES2":
        return "RES2"
    if occupancy_name == "RES3A" or "RES1" in occupancy_name:
        return "RES1_RES3A_RES3B"
    return "default"


def _foundation_code(found_type: str) -> str:
    if found_type == "I":
        return "P"
    if found_type == "W":
        return "C"
    return found_type


@dataclass
class StructureStochastic(BaseStructure):
    """A structure whose values and damage relationships may be uncertain."""

    use_uncertainty: bool = False
    occ_type: OccupancyTypeStochastic = field(
        default_factory=lambda: OccupancyTypeStochastic("")
    )
    found_type: str = ""
    firm_zone: str = ""
    construction_type: str = ""
    struct_val: ParameterValue = field(default_factory=lambda: ParameterValue(0.0))
    cont_val: ParameterValue = field(default_factory=lambda: ParameterValue(0.0))
    found_ht: ParameterValue = field(default_factory=lambda: ParameterValue(0.0))
    num_stories: int = 0
    population: PopulationSet = field(default_factory=PopulationSet)

    def apply_foundation_height_uncertainty(self, uncertainty: FoundationUncertainty) -> None:
        """Replace the foundation height with the distribution for this structure's kind."""
        key = f"{_foundation_group(self.occ_type.name)}_{_foundation_code(self.found_type)}"
        entry = uncertainty.values.get(key) or uncertainty.values.get("default_slab")
        if entry is None:
            return
        distribution = entry.vzone if self.firm_zone == "V" else entry.default
        if distribution is not None:
            self.found_ht = ParameterValue(distribution)

    def sample(self, seed: int) -> StructureDeterministic:
        """Realise a deterministic structure from a seeded generator."""
        rng = random.Random(seed)
        if self.use_uncertainty:
            occ_type = self.occ_type.sample(rng.getrandbits(63))
            struct_val = self.struct_val.sample_value(rng.random())
            cont_val = self.cont_val.sample_value(rng.random())
            found_ht = max(self.found_ht.sample_value(rng.random()), 0.0)
        else:
            occ_type = self.occ_type.central_tendency()
            struct_val = self.struct_val.central_tendency()
            cont_val = self.cont_val.central_tendency()
            found_ht = self.found_ht.central_tendency()
        pop = self.population
        return StructureDeterministic(
            name=self.name,
            dam_cat=self.dam_cat,
            cbfips=self.cbfips,
            x=self.x,
            y=self.y,
            ground_elevation=self.ground_elevation,
            occ_type=occ_type,
            found_type=self.found_type,
            firm_zone=self.firm_zone,
            construction_type=self.construction_type,
            struct_val=struct_val,
            cont_val=cont_val,
            found_ht=found_ht,
            num_stories=self.num_stories,
            population=PopulationSet(
                pop2pmo65=pop.pop2amo65,
                pop2pmu65=pop.pop2pmu65,
                pop2amo65=pop.pop2amo65,
                pop2amu65=pop.pop2amu65,
            ),
        )

    def compute(self, event: HazardEvent) -> Result:
        """Sample with an unseeded draw and compute the consequences of ``event``."""
        return self.sample(random.getrandbits(63)).compute(event)


@dataclass
class StructureDeterministic(BaseStructure):
    """A structure with fixed values and damage relationships."""

    occ_type: OccupancyTypeDeterministic = field(
        default_factory=lambda: OccupancyTypeDeterministic("")
    )
    found_type: str = ""
    firm_zone: str = ""
    construction_type: str = ""
    struct_val: float = 0.0
    cont_val: float = 0.0
    found_ht: float = 0.0
    num_stories: int = 0
    population: PopulationSet = field(default_factory=PopulationSet)

    def _row(self, event: HazardEvent, sdam: float, cdam: float, sper: float, cper: float) -> Result:
        pop = self.population
        values: list[Any] = [
            self.name,
            self.x,
            self.y,
            event,
            self.dam_cat,
            self.occ_type.name,
            sdam,
            cdam,
            pop.pop2amu65,
            pop.pop2amo65,
            pop.pop2pmu65,
            pop.pop2pmo65,
            self.cbfips,
            sper,
            cper,
        ]
        return Result(list(RESULT_HEADERS), values)

    def compute(self, event: HazardEvent) -> Result:
        """Structure and content damage caused by ``event``."""
        structure_fn = self.occ_type.damage_function_for_hazard("structure", event)
        content_fn = self.occ_type.damage_function_for_hazard("contents", event)
        struct_val = self.struct_val
        cont_val = self.cont_val
        if structure_fn.damage_driver == Parameter.DEPTH and structure_fn.damage_function.xvals:
            curve_max = structure_fn.damage_function.xvals[-1]
            representative = math.ceil(curve_max / 9.0)
            if self.num_stories > representative:
                modifier = representative / self.num_stories
                struct_val *= modifier
                cont_val *= modifier
        if event.has(structure_fn.damage_driver) and event.has(content_fn.damage_driver):
            if structure_fn.damage_driver == Parameter.DEPTH:
                driver_value = event.depth - self.found_ht
            elif structure_fn.damage_driver == Parameter.EROSION:
                driver_value = event.erosion
            else:
                raise ValueError("structures: could not understand the damage driver")
            sper = structure_fn.damage_function.sample_value(driver_value) / 100
            cper = content_fn.damage_function.sample_value(driver_value) / 100
            return self._row(event, sper * struct_val, cper * cont_val, sper, cper)
        if event.has(Parameter.QUALITATIVE):
            return self._row(event, 0.0, 0.0, 0.0, 0.0)
        raise ValueError("structure: hazard did not contain valid parameters to impact a structure")