"""Structures streamed from a National Structure Inventory style web service."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence

import requests

from .foundation import FoundationUncertainty
from .occupancy import JsonOccupancyTypeProvider, OccupancyTypeStochastic
from .results import ParameterValue
from .structures import PopulationSet, StructureStochastic

log = logging.getLogger(__name__)

DEFAULT_OCCTYPE = "RES1-1SNB"

# attribute name -> (JSON property name, converter)
_PROPERTY_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "name": ("fd_id", int),
    "x": ("x", float),
    "y": ("y", float),
    "occtype": ("occtype", str),
    "found_ht": ("found_ht", float),
    "found_type": ("found_type", str),
    "dam_cat": ("st_damcat", str),
    "struct_val": ("val_struct", float),
    "cont_val": ("val_cont", float),
    "cbfips": ("cbfips", str),
    "pop2amu65": ("pop2amu65", int),
    "pop2amo65": ("pop2amo65", int),
    "pop2pmu65": ("pop2pmu65", int),
    "pop2pmo65": ("pop2pmo65", int),
    "num_stories": ("num_story", int),
    "firm_zone": ("firmzone", str),
    "ground_elevation": ("ground_elv", float),
    "construction_type": ("bldgtype", str),
}


@dataclass(frozen=True)
class NsiProperties:
    """The attributes of one structure feature as served by the inventory."""

    name: int = 0
    x: float = 0.0
    y: float = 0.0
    occtype: str = ""
    found_ht: float = 0.0
    found_type: str = ""
    dam_cat: str = ""
    struct_val: float = 0.0
    cont_val: float = 0.0
    cbfips: str = ""
    pop2amu65: int = 0
    pop2amo65: int = 0
    pop2pmu65: int = 0
    pop2pmo65: int = 0
    num_stories: int = 0
    firm_zone: str = ""
    ground_elevation: float = 0.0
    construction_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NsiProperties:
        """Read the feature ``properties`` mapping; absent keys keep their defaults."""
        kwargs = {
            attribute: convert(data[key])
            for attribute, (key, convert) in _PROPERTY_FIELDS.items()
            if data.get(key) is not None
        }
        return cls(**kwargs)


def nsi_feature_to_structure(
    properties: NsiProperties,
    occupancy_types: Mapping[str, OccupancyTypeStochastic],
    default_occtype: OccupancyTypeStochastic,
    use_uncertainty: bool,
    foundation_uncertainty: Optional[FoundationUncertainty],
) -> StructureStochastic:
    """Build a stochastic structure from inventory properties.

    The occupancy type is looked up as ``occtype-foundtype`` first, then as
    ``occtype``, and falls back to ``default_occtype``.
    """
    occtype = occupancy_types.get(f"{properties.occtype}-{properties.found_type}")
    if occtype is None:
        occtype = occupancy_types.get(properties.occtype)
    if occtype is None:
        log.warning("Using default %s not found", properties.occtype)
        occtype = default_occtype
    structure = StructureStochastic(
        name=str(properties.name),
        dam_cat=properties.dam_cat,
        cbfips=properties.cbfips,
        x=properties.x,
        y=properties.y,
        ground_elevation=properties.ground_elevation,
        use_uncertainty=use_uncertainty,
        occ_type=occtype,
        found_type=properties.found_type,
        firm_zone=properties.firm_zone,
        construction_type=properties.construction_type,
        struct_val=ParameterValue(properties.struct_val),
        cont_val=ParameterValue(properties.cont_val),
        found_ht=ParameterValue(properties.found_ht),
        num_stories=properties.num_stories,
        population=PopulationSet(
            pop2pmo65=properties.pop2pmo65,
            pop2pmu65=properties.pop2pmu65,
            pop2amo65=properties.pop2amo65,
            pop2amu65=properties.pop2amu65,
        ),
    )
    if foundation_uncertainty is not None:
        structure.apply_foundation_height_uncertainty(foundation_uncertainty)
    return structure


def _decode_stream(chunks: Iterable[str]) -> Iterator[Any]:
    """Yield each JSON value in a stream of concatenated JSON documents."""
    decoder = json.JSONDecoder()
    buffer = ""
    for chunk in chunks:
        buffer += chunk
        while True:
            buffer = buffer.lstrip()
            if not buffer:
                break
            try:
                value, end = decoder.raw_decode(buffer)
            except json.JSONDecodeError:
                break
            yield value
            buffer = buffer[end:]
    leftover = buffer.strip()
    if leftover:
        log.error("Error unmarshalling JSON record: %.80s.  Stopping Compute.", leftover)


@dataclass
class NsiStreamProvider:
    """Streams stochastic structures from the inventory service at ``api_url``."""

    api_url: str
    occupancy_type_provider: JsonOccupancyTypeProvider
    foundation_uncertainty: Optional[FoundationUncertainty] = field(
        default_factory=FoundationUncertainty.default
    )
    use_uncertainty: bool = False
    timeout: Optional[float] = None

    def by_fips(self, fips: str) -> Iterator[StructureStochastic]:
        """Structures whose census block code starts with ``fips``."""
        url = f"{self.api_url}?fips={fips}&fmt=fs"
        return self._stream(lambda: requests.get(url, stream=True, verify=False, timeout=self.timeout))

    def by_bbox(self, bbox: Sequence[float]) -> Iterator[StructureStochastic]:
        """Structures inside the bounding box given as a sequence of coordinates."""
        coordinates = ",".join(str(float(v)) for v in bbox)
        url = f"{self.api_url}?bbox={coordinates}&fmt=fs"
        return self._stream(lambda: requests.get(url, stream=True, verify=False, timeout=self.timeout))

    def by_json_post(self, body: str) -> Iterator[StructureStochastic]:
        """Structures inside the GeoJSON feature collection ``body``."""
        url = f"{self.api_url}?fmt=fs"
        return self._stream(
            lambda: requests.post(
                url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
                stream=True,
                verify=False,
                timeout=self.timeout,
            )
        )

    def _stream(self, send: Callable[[], requests.Response]) -> Iterator[StructureStochastic]:
        occupancy_types = self.occupancy_type_provider.occupancy_type_map()
        default = occupancy_types.get(DEFAULT_OCCTYPE) or OccupancyTypeStochastic(DEFAULT_OCCTYPE)
        with send() as response:
            response.raise_for_status()
            if response.encoding is None:
                response.encoding = "utf-8"
            chunks = response.iter_content(chunk_size=65536, decode_unicode=True)
            for record in _decode_stream(chunks):
                if not isinstance(record, dict):
                    log.error("Error unmarshalling JSON record: not a feature.  Stopping Compute.")
                    return
                properties = NsiProperties.from_dict(record.get("properties") or {})
                yield nsi_feature_to_structure(
                    properties,
                    occupancy_types,
                    default,
                    self.use_uncertainty,
                    self.foundation_uncertainty,
                )