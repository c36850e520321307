"""Choosing and building a structure provider from a description."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Protocol, Sequence, Union

from .nsi import NsiStreamProvider
from .occupancy import JsonOccupancyTypeProvider


class StructureProvider(Protocol):
    """A source of structures, by FIPS code or by bounding box."""

    def by_fips(self, fips: str) -> Iterable[Any]: ...

    def by_bbox(self, bbox: Sequence[float]) -> Iterable[Any]: ...


class StructureProviderType(str, Enum):
    """The kinds of structure provider that can be described."""

    UNKNOWN = "UNKNOWN"
    NSIAPI = "NSIAPI"
    GPKG = "GPKG"
    SHP = "SHP"
    OGR = "OGR"

    def describe(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    StructureProviderType.NSIAPI: "the NSI API",
    StructureProviderType.SHP: "a local Shapefile",
    StructureProviderType.GPKG: "a local geopackage",
    StructureProviderType.OGR: "ogr dataset determined based on driver",
    StructureProviderType.UNKNOWN: "an unknown structure provider type",
}


def structure_schema() -> list[str]:
    """Fields every structure dataset must carry."""
    return [
        "fd_id",
        "cbfips",
        "x",
        "y",
        "st_damcat",
        "occtype",
        "val_struct",
        "val_cont",
        "found_ht",
        "found_type",
    ]


def optional_schema() -> list[str]:
    """Fields a structure dataset may carry."""
    return [
        "num_story",
        "pop2amu65",
        "pop2amo65",
        "pop2pmu65",
        "pop2pmo65",
        "ground_elv",
        "bldgtype",
        "firmzone",
    ]


@dataclass
class StructureProviderInfo:
    """A description of where structures come from."""

    provider_type: Union[StructureProviderType, str]
    driver: str = ""
    structure_file_path: str = ""
    occtype_file_path: str = ""
    layer_name: str = ""
    api_url: str = ""

    def create(self) -> StructureProvider:
        """Build the described provider; raise ValueError when it cannot be built."""
        try:
            kind = StructureProviderType(self.provider_type)
        except ValueError:
            raise ValueError(
                "structure provider: unable to generate new structure provider from "
                "an unspecified structure provider type"
            ) from None
        if kind is StructureProviderType.UNKNOWN:
            raise ValueError(
                "structure provider: unable to generate new structure provider from "
                + kind.describe()
            )
        if kind is StructureProviderType.NSIAPI:
            if not self.api_url:
                raise ValueError("structure provider: an api url is required for " + kind.describe())
            if not self.occtype_file_path:
                raise ValueError(
                    "structure provider: an occupancy type file is required for " + kind.describe()
                )
            return NsiStreamProvider(
                self.api_url, JsonOccupancyTypeProvider.from_path(self.occtype_file_path)
            )
        if kind in (StructureProviderType.GPKG, StructureProviderType.OGR) and not self.layer_name:
            raise ValueError(
                "structure provider: layer name must be specified for " + kind.describe()
            )
        raise ValueError(
            f"structure provider: reading {kind.describe()} needs a spatial data reader, "
            "which is not available"
        )