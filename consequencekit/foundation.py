"""Foundation height uncertainty by occupancy group and foundation type."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .statistics import ContinuousDistribution, NormalDistribution, distribution_from_dict


@dataclass(frozen=True)
class FoundationHeightUncertainty:
    """Foundation height distributions inside and outside a V zone."""

    default: Optional[ContinuousDistribution]
    vzone: Optional[ContinuousDistribution] = None

    def select(self, firm_zone: str) -> Optional[ContinuousDistribution]:
        """The V-zone distribution for zone ``"v"`` when one exists, otherwise the default."""
        if self.vzone is not None and firm_zone == "v":
            return self.vzone
        return self.default

    def to_dict(self) -> dict[str, Any]:
        return {
            "default": self.default.to_dict() if self.default is not None else None,
            "vzone": self.vzone.to_dict() if self.vzone is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FoundationHeightUncertainty:
        default = data.get("default")
        vzone = data.get("vzone")
        return cls(
            default=distribution_from_dict(default) if default else None,
            vzone=distribution_from_dict(vzone) if vzone else None,
        )


_DEFAULT_TABLE = {
    "default_S": ((0.53, 1.01), (0.44, 1.08)),
    "default_C": ((0.53, 1.01), (1.74, 0.78)),
    "default_B": ((0.53, 1.01), (2.19, 1.56)),
    "default_P": ((0.53, 1.01), (7.6, 3.46)),
    "RES2_S": ((2.0, 0.93), (2.0, 0.93)),
    "RES2_C": ((2.0, 0.93), (2.0, 0.93)),
    "RES2_B": ((2.0, 0.93), (2.0, 0.93)),
    "RES2_P": ((2.0, 0.93), (2.0, 0.93)),
    "RES1_RES3A_RES3B_S": ((0.77, 0.91), (0.77, 0.91)),
    "RES1_RES3A_RES3B_C": ((1.74, 0.78), (1.74, 0.78)),
    "RES1_RES3A_RES3B_B": ((2.91, 1.56), (2.91, 1.56)),
    "RES1_RES3A_RES3B_P": ((7.6, 3.46), (7.6, 3.46)),
}


@dataclass
class FoundationUncertainty:
    """A table of foundation height uncertainty keyed by group and foundation type."""

    values: dict[str, FoundationHeightUncertainty] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"values": {k: v.to_dict() for k, v in self.values.items()}})

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> FoundationUncertainty:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("foundation uncertainty must be a JSON object")
        values = data.get("values") or {}
        return cls({k: FoundationHeightUncertainty.from_dict(v) for k, v in values.items()})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> FoundationUncertainty:
        return cls.from_json(Path(path).read_bytes())

    @classmethod
    def default(cls) -> FoundationUncertainty:
        return cls(
            {
                key: FoundationHeightUncertainty(
                    default=NormalDistribution(*default),
                    vzone=NormalDistribution(*vzone),
                )
                for key, (default, vzone) in _DEFAULT_TABLE.items()
            }
        )