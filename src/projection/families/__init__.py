"""
Projection families

Registration is a read-only mapping from family name to class, built once
on first use. Adding a family means adding one entry to _FAMILIES.
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from src.projection.base import Projection
from src.projection.families.aea import AlbersEqualArea, LambertEqualAreaConic
from src.projection.families.aeqd import AzimuthalEquidistant
from src.projection.families.airy import Airy
from src.projection.families.eqc import EquidistantCylindrical
from src.projection.families.latlong import LatLong, LongLat
from src.projection.families.lcc import LambertConformalConic
from src.projection.families.merc import Mercator
from src.projection.families.stere import ObliqueStereographic, Stereographic
from src.projection.families.tmerc import TransverseMercator, UniversalTransverseMercator

_FAMILIES: tuple[type[Projection], ...] = (
    TransverseMercator,
    UniversalTransverseMercator,
    AlbersEqualArea,
    LambertEqualAreaConic,
    AzimuthalEquidistant,
    Stereographic,
    ObliqueStereographic,
    Airy,
    Mercator,
    LambertConformalConic,
    EquidistantCylindrical,
    LatLong,
    LongLat,
)


@lru_cache(maxsize=1)
def family_registry() -> Mapping[str, type[Projection]]:
    """Read-only name -> class mapping."""
    return MappingProxyType({family.name: family for family in _FAMILIES})


def lookup_family(name: str) -> Optional[type[Projection]]:
    """Family class registered under `name` (case-sensitive), or None."""
    return family_registry().get(name)


def available_families() -> tuple[str, ...]:
    return tuple(family_registry())


__all__ = [
    "AlbersEqualArea",
    "Airy",
    "AzimuthalEquidistant",
    "EquidistantCylindrical",
    "LambertConformalConic",
    "LambertEqualAreaConic",
    "LatLong",
    "LongLat",
    "Mercator",
    "ObliqueStereographic",
    "Stereographic",
    "TransverseMercator",
    "UniversalTransverseMercator",
    "available_families",
    "family_registry",
    "lookup_family",
]
