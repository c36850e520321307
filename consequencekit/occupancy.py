"""Damage functions, occupancy types and a JSON-backed occupancy type provider."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Union

from .hazards import HazardEvent, Parameter
from .statistics import PairedData, UncertaintyPairedData

UncertainCurve = Union[PairedData, UncertaintyPairedData]


def _parameter_from_key(key: str) -> Parameter:
    try:
        return Parameter.from_key(key)
    except ValueError:
        raise ValueError(f"structures: could not unmarshal parameter key {key!r}") from None


def _curve_from_dict(data: Mapping[str, Any]) -> UncertainCurve:
    if any(isinstance(y, Mapping) for y in data.get("yvalues", ())):
        return UncertaintyPairedData.from_dict(data)
    return PairedData.from_dict(data)


def _sample_curve(curve: UncertainCurve, rng: random.Random) -> PairedData:
    if isinstance(curve, PairedData):
        return curve
    return curve.sample_value_sampler(rng.random()).force_monotonic_in_range(0.0, 100.0)


def _central_curve(curve: UncertainCurve) -> PairedData:
    if isinstance(curve, PairedData):
        return curve
    return curve.central_tendency()


@dataclass
class DamageFunction:
    """A deterministic damage curve driven by one hazard parameter."""

    source: str
    damage_driver: Parameter
    damage_function: PairedData

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "damagedriver": self.damage_driver.to_key(),
            "damagefunction": self.damage_function.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DamageFunction:
        return cls(
            source=data.get("source", ""),
            damage_driver=_parameter_from_key(data.get("damagedriver", "default")),
            damage_function=PairedData.from_dict(data.get("damagefunction") or {}),
        )


@dataclass
class DamageFunctionStochastic:
    """A damage curve whose ordinates may be uncertain."""

    source: str
    damage_driver: Parameter
    damage_function: UncertainCurve

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "damagedriver": self.damage_driver.to_key(),
            "damagefunction": self.damage_function.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DamageFunctionStochastic:
        return cls(
            source=data.get("source", ""),
            damage_driver=_parameter_from_key(data.get("damagedriver", "default")),
            damage_function=_curve_from_dict(data.get("damagefunction") or {}),
        )


@dataclass
class DamageFunctionFamily:
    """Deterministic damage functions keyed by the hazard parameters they apply to."""

    damage_functions: dict[Parameter, DamageFunction] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "damagefunctions": {
                key.to_key(): df.to_dict() for key, df in self.damage_functions.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DamageFunctionFamily:
        functions = data.get("damagefunctions") or {}
        return cls(
            {_parameter_from_key(k): DamageFunction.from_dict(v) for k, v in functions.items()}
        )


@dataclass
class DamageFunctionFamilyStochastic:
    """Possibly uncertain damage functions keyed by hazard parameters."""

    damage_functions: dict[Parameter, DamageFunctionStochastic] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "damagefunctions": {
                key.to_key(): df.to_dict() for key, df in self.damage_functions.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DamageFunctionFamilyStochastic:
        functions = data.get("damagefunctions") or {}
        return cls(
            {
                _parameter_from_key(k): DamageFunctionStochastic.from_dict(v)
                for k, v in functions.items()
            }
        )


@dataclass
class OccupancyTypeDeterministic:
    """An occupancy type whose damage relationships carry no uncertainty."""

    name: str
    component_damage_functions: dict[str, DamageFunctionFamily] = field(default_factory=dict)

    def damage_function_for_hazard(self, component: str, event: HazardEvent) -> DamageFunction:
        """The function matching the event's parameters, else the component's default."""
        family = self.component_damage_functions.get(component)
        if family is None:
            raise KeyError("component does not exist for this occupancy type")
        functions = family.damage_functions
        found = functions.get(event.parameters())
        if found is not None:
            return found
        try:
            return functions[Parameter.DEFAULT]
        except KeyError:
            raise KeyError(
                f"component {component!r} has no damage function for this hazard"
            ) from None


@dataclass
class OccupancyTypeStochastic:
    """An occupancy type with possibly uncertain damage relationships."""

    name: str
    component_damage_functions: dict[str, DamageFunctionFamilyStochastic] = field(
        default_factory=dict
    )

    def _realise(self, make_curve) -> OccupancyTypeDeterministic:
        components = {
            component: DamageFunctionFamily(
                {
                    key: DamageFunction(df.source, df.damage_driver, make_curve(df.damage_function))
                    for key, df in family.damage_functions.items()
                }
            )
            for component, family in self.component_damage_functions.items()
        }
        return OccupancyTypeDeterministic(self.name, components)

    def sample(self, seed: int) -> OccupancyTypeDeterministic:
        """Draw one realisation of every uncertain curve from a seeded generator."""
        rng = random.Random(seed)
        return self._realise(lambda curve: _sample_curve(curve, rng))

    def central_tendency(self) -> OccupancyTypeDeterministic:
        return self._realise(_central_curve)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "componentdamagefunctions": {
                k: v.to_dict() for k, v in self.component_damage_functions.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OccupancyTypeStochastic:
        components = data.get("componentdamagefunctions") or {}
        return cls(
            name=data.get("name", ""),
            component_damage_functions={
                k: DamageFunctionFamilyStochastic.from_dict(v) for k, v in components.items()
            },
        )


@dataclass
class OccupancyTypesContainer:
    """A named collection of stochastic occupancy types."""

    occupancy_types: dict[str, OccupancyTypeStochastic] = field(default_factory=dict)

    def extend(self, extension: Mapping[str, OccupancyTypeStochastic]) -> None:
        """Add new occupancy types; an existing name is an error."""
        for key, value in extension.items():
            if key in self.occupancy_types:
                raise ValueError(f"structures: occupancy type {key} already exists")
            self.occupancy_types[key] = value

    def merge(self, additional: Mapping[str, OccupancyTypeStochastic]) -> None:
        """Add damage functions; one that already exists for a parameter is an error."""
        for key, value in additional.items():
            current = self.occupancy_types.get(key)
            if current is None:
                self.occupancy_types[key] = value
                continue
            for component, family in value.component_damage_functions.items():
                existing = current.component_damage_functions.get(component)
                if existing is None:
                    current.component_damage_functions[component] = family
                    continue
                for parameter, df in family.damage_functions.items():
                    if parameter in existing.damage_functions:
                        raise ValueError(
                            f"structures: occupancy type {key} already exists with parameter "
                            f"{parameter} on component {component}"
                        )
                    existing.damage_functions[parameter] = df

    def override(self, overrides: Mapping[str, OccupancyTypeStochastic]) -> None:
        """Replace existing damage functions; a missing type or parameter is an error."""
        for key, value in overrides.items():
            current = self.occupancy_types.get(key)
            if current is None:
                raise ValueError(f"structures: occupancy type {key} doesn't currently exist.")
            for component, family in value.component_damage_functions.items():
                existing = current.component_damage_functions.get(component)
                if existing is None:
                    current.component_damage_functions[component] = family
                    continue
                for parameter, df in family.damage_functions.items():
                    if parameter not in existing.damage_functions:
                        raise ValueError(
                            f"structures: occupancy type {key} doesn't currently exist with "
                            f"parameter {parameter} on component {component}"
                        )
                    existing.damage_functions[parameter] = df

    def report(self) -> str:
        """A markdown table of every damage function held."""
        lines = [
            "|occtype| componenttype| compoundhazard| damageDriver| source|",
            "|-----| -----| -----| -----| -----|",
        ]
        for occtype, ot in self.occupancy_types.items():
            for component, family in ot.component_damage_functions.items():
                for parameter, df in family.damage_functions.items():
                    lines.append(
                        f"|{occtype}| {component}| {parameter}| {df.damage_driver}| {df.source}|"
                    )
        return "".join(line + "\n" for line in lines)

    def to_dict(self) -> dict[str, Any]:
        return {"occupancytypes": {k: v.to_dict() for k, v in self.occupancy_types.items()}}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OccupancyTypesContainer:
        types = data.get("occupancytypes") or {}
        return cls({k: OccupancyTypeStochastic.from_dict(v) for k, v in types.items()})


@dataclass
class JsonOccupancyTypeProvider:
    """Occupancy types read from and written to a JSON document."""

    container: OccupancyTypesContainer = field(default_factory=OccupancyTypesContainer)
    path: str = ""

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> JsonOccupancyTypeProvider:
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"structures: unable to parse json occupancy type file at path: {path}"
            ) from exc
        if not isinstance(data, dict):
            raise ValueError(
                f"structures: unable to parse json occupancy type file at path: {path}"
            )
        return cls(OccupancyTypesContainer.from_dict(data), str(path))

    def occupancy_type_map(self) -> dict[str, OccupancyTypeStochastic]:
        return self.container.occupancy_types

    def write(self, path: Union[str, Path]) -> None:
        """Append the occupancy types as JSON to ``path``, creating it if needed."""
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(json.dumps(self.container.to_dict()))