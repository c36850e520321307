"""Hazard parameters and the hazard events that carry them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntFlag
from typing import Optional


class Parameter(IntFlag):
    """Bit flags naming the quantities a hazard event can describe."""

    DEFAULT = 0
    DEPTH = 1
    VELOCITY = 2
    ARRIVAL_TIME = 4
    EROSION = 8
    DURATION = 16
    WAVE_HEIGHT = 32
    SALINITY = 64
    QUALITATIVE = 128
    DV = 256
    HIGH_WAVE_HEIGHT = 512
    MODERATE_WAVE_HEIGHT = 1024

    def _members(self) -> list[Parameter]:
        return [m for m in type(self) if m.value and (self.value & m.value) == m.value]

    def to_key(self) -> str:
        """A stable text form, such as ``depth|salinity`` or ``default``."""
        members = self._members()
        if not members:
            return "default"
        return "|".join(m.name.lower() for m in members)

    @classmethod
    def from_key(cls, key: str) -> Parameter:
        result = cls.DEFAULT
        for part in key.split("|"):
            name = part.strip().upper()
            try:
                result |= cls[name]
            except KeyError:
                raise ValueError(f"unknown hazard parameter {part!r}") from None
        return result

    def __str__(self) -> str:
        return self.to_key()


@dataclass
class HazardEvent:
    """A hazard at one location; any quantity left as None is absent."""

    depth: Optional[float] = None
    velocity: Optional[float] = None
    arrival_time: Optional[datetime] = None
    erosion: Optional[float] = None
    duration: Optional[float] = None
    wave_height: Optional[float] = None
    salinity: Optional[bool] = None
    dv: Optional[float] = None
    qualitative: Optional[str] = None

    def parameters(self) -> Parameter:
        flags = Parameter.DEFAULT
        simple = (
            (self.depth, Parameter.DEPTH),
            (self.velocity, Parameter.VELOCITY),
            (self.arrival_time, Parameter.ARRIVAL_TIME),
            (self.erosion, Parameter.EROSION),
            (self.duration, Parameter.DURATION),
            (self.dv, Parameter.DV),
            (self.qualitative, Parameter.QUALITATIVE),
        )
        for value, flag in simple:
            if value is not None:
                flags |= flag
        if self.salinity:
            flags |= Parameter.SALINITY
        if self.wave_height is not None:
            flags |= Parameter.WAVE_HEIGHT
            if self.wave_height > 3.0:
                flags |= Parameter.HIGH_WAVE_HEIGHT
            elif self.wave_height > 0.0:
                flags |= Parameter.MODERATE_WAVE_HEIGHT
        return flags

    def has(self, parameter: Parameter) -> bool:
        return (self.parameters() & parameter) == parameter