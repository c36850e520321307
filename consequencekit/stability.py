"""Building stability criteria under flow depth and velocity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .hazards import HazardEvent, Parameter


class Stability(IntEnum):
    """Whether a building stands or collapses."""

    STABLE = 1
    COLLAPSED = 2

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class StabilityCriteria:
    """Thresholds that must all be exceeded for a building to collapse."""

    minimum_velocity: float
    minimum_depth: float
    depth_times_velocity: float

    def evaluate(self, event: HazardEvent) -> Stability:
        """Judge stability from the event's depth-velocity product and depth."""
        if not event.has(Parameter.DV):
            raise ValueError("no dv to evaluate stability criteria")
        if not event.has(Parameter.DEPTH):
            raise ValueError("no depth to evaluate stability criteria")
        dv = event.dv
        depth = event.depth
        if event.has(Parameter.VELOCITY):
            velocity = event.velocity
        elif depth == 0:
            velocity = dv
        else:
            # Underestimates peak velocity: peak depth and peak velocity need not coincide.
            velocity = dv / depth
        if depth > self.minimum_depth and velocity > self.minimum_velocity:
            if dv >= self.depth_times_velocity:
                return Stability.COLLAPSED
        return Stability.STABLE


RESC_DAM_WOOD_UNANCHORED = StabilityCriteria(0.0, 0.0, 32.3)
RESC_DAM_WOOD_ANCHORED = StabilityCriteria(0.0, 0.0, 75.3)
RESC_DAM_MASONRY_CONCRETE_BRICK = StabilityCriteria(6.6, 0.0, 75.3)