"""
Ellipsoid: reference ellipsoid model and the named ellipsoid registry

Immutable Pydantic model holding only the defining parameters (semi-major
axis and flattening denominator). Every derived quantity is a property
computed on demand.

The registry is a fixed compiled-in table, built once on first lookup and
exposed read-only. Lookups are case-insensitive.
"""

import math
from functools import lru_cache
from types import MappingProxyType
from typing import Final, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ELLIPSOID MODEL
# =============================================================================


class Ellipsoid(BaseModel):
    """
    Reference ellipsoid.

    A flattening denominator `rf` of 0 denotes a sphere.

    Immutable model (frozen=True); shared read-only by every projection
    built on it.
    """

    name: str = Field(..., min_length=1, description="Registry name, e.g. 'WGS84'")
    a: float = Field(..., gt=0, description="Semi-major axis (metres)")
    rf: float = Field(0.0, ge=0, description="Flattening denominator 1/f (0 = sphere)")
    description: str = Field("", description="Human-readable name")

    model_config = {"frozen": True}

    @field_validator("a")
    @classmethod
    def validate_axis_finite(cls, v: float) -> float:
        """Semi-major axis must be a finite length."""
        if not math.isfinite(v):
            raise ValueError(f"semi-major axis must be finite, got {v}")
        return v

    @field_validator("rf")
    @classmethod
    def validate_flattening(cls, v: float) -> float:
        """
        Flattening denominator must give 0 <= f < 1.

        rf in (0, 1] would mean a flattening of 1 or more (degenerate).
        """
        if not math.isfinite(v):
            raise ValueError(f"flattening denominator must be finite, got {v}")
        if 0.0 < v <= 1.0:
            raise ValueError(f"flattening denominator must be 0 (sphere) or > 1, got {v}")
        return v

    # -------------------------------------------------------------------------
    # Alternative constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_semi_minor(cls, name: str, a: float, b: float, description: str = "") -> "Ellipsoid":
        """
        Build an ellipsoid from both semi-axes.

        Raises:
            ValueError: If b is not in (0, a]
        """
        if not (0.0 < b <= a):
            raise ValueError(f"semi-minor axis must be in (0, a], got b={b} for a={a}")
        rf = 0.0 if b == a else a / (a - b)
        return cls(name=name, a=a, rf=rf, description=description)

    @classmethod
    def from_flattening(cls, name: str, a: float, f: float, description: str = "") -> "Ellipsoid":
        """Build an ellipsoid from the flattening f (0 = sphere)."""
        if not (0.0 <= f < 1.0):
            raise ValueError(f"flattening must be in [0, 1), got {f}")
        return cls(name=name, a=a, rf=0.0 if f == 0.0 else 1.0 / f, description=description)

    @classmethod
    def from_eccentricity_squared(cls, name: str, a: float, es: float, description: str = "") -> "Ellipsoid":
        """Build an ellipsoid from the first eccentricity squared."""
        if not (0.0 <= es < 1.0):
            raise ValueError(f"eccentricity squared must be in [0, 1), got {es}")
        return cls.from_flattening(name, a, 1.0 - math.sqrt(1.0 - es), description)

    @classmethod
    def sphere(cls, name: str, radius: float, description: str = "") -> "Ellipsoid":
        """Build a sphere of the given radius."""
        return cls(name=name, a=radius, rf=0.0, description=description)

    # -------------------------------------------------------------------------
    # Derived quantities
    # -------------------------------------------------------------------------

    @property
    def f(self) -> float:
        """Flattening."""
        return 0.0 if self.rf == 0.0 else 1.0 / self.rf

    @property
    def b(self) -> float:
        """Semi-minor axis (metres)."""
        return self.a * (1.0 - self.f)

    @property
    def es(self) -> float:
        """First eccentricity squared: 2f - f^2."""
        f = self.f
        return f * (2.0 - f)

    @property
    def e(self) -> float:
        """First eccentricity."""
        return math.sqrt(self.es)

    @property
    def one_es(self) -> float:
        """1 - e^2."""
        return 1.0 - self.es

    @property
    def esp(self) -> float:
        """Second eccentricity squared: e^2 / (1 - e^2)."""
        return self.es / self.one_es

    @property
    def is_sphere(self) -> bool:
        """True when the flattening is zero."""
        return self.rf == 0.0


# =============================================================================
# REGISTRY
# =============================================================================

# (name, a, rf, b, description); exactly one of rf / b is given
_ELLIPSOID_TABLE: Final[tuple[tuple[str, float, Optional[float], Optional[float], str], ...]] = (
    ("MERIT", 6378137.0, 298.257, None, "MERIT 1983"),
    ("SGS85", 6378136.0, 298.257, None, "Soviet Geodetic System 85"),
    ("GRS80", 6378137.0, 298.257222101, None, "GRS 1980(IUGG, 1980)"),
    ("IAU76", 6378140.0, 298.257, None, "IAU 1976"),
    ("airy", 6377563.396, None, 6356256.910, "Airy 1830"),
    ("APL4.9", 6378137.0, 298.25, None, "Appl. Physics. 1965"),
    ("NWL9D", 6378145.0, 298.25, None, "Naval Weapons Lab., 1965"),
    ("mod_airy", 6377340.189, None, 6356034.446, "Modified Airy"),
    ("andrae", 6377104.43, 300.0, None, "Andrae 1876 (Den., Iclnd.)"),
    ("aust_SA", 6378160.0, 298.25, None, "Australian Natl & S. Amer. 1969"),
    ("GRS67", 6378160.0, 298.2471674270, None, "GRS 67(IUGG 1967)"),
    ("bessel", 6377397.155, 299.1528128, None, "Bessel 1841"),
    ("bess_nam", 6377483.865, 299.1528128, None, "Bessel 1841 (Namibia)"),
    ("clrk66", 6378206.4, None, 6356583.8, "Clarke 1866"),
    ("clrk80", 6378249.145, 293.4663, None, "Clarke 1880 mod."),
    ("CPM", 6375738.7, 334.29, None, "Comm. des Poids et Mesures 1799"),
    ("delmbr", 6376428.0, 311.5, None, "Delambre 1810 (Belgium)"),
    ("engelis", 6378136.05, 298.2566, None, "Engelis 1985"),
    ("evrst30", 6377276.345, 300.8017, None, "Everest 1830"),
    ("evrst48", 6377304.063, 300.8017, None, "Everest 1948"),
    ("evrst56", 6377301.243, 300.8017, None, "Everest 1956"),
    ("evrst69", 6377295.664, 300.8017, None, "Everest 1969"),
    ("evrstSS", 6377298.556, 300.8017, None, "Everest (Sabah & Sarawak)"),
    ("fschr60", 6378166.0, 298.3, None, "Fischer (Mercury Datum) 1960"),
    ("fschr60m", 6378155.0, 298.3, None, "Modified Fischer 1960"),
    ("fschr68", 6378150.0, 298.3, None, "Fischer 1968"),
    ("helmert", 6378200.0, 298.3, None, "Helmert 1906"),
    ("hough", 6378270.0, 297.0, None, "Hough"),
    ("intl", 6378388.0, 297.0, None, "International 1909 (Hayford)"),
    ("krass", 6378245.0, 298.3, None, "Krassovsky, 1942"),
    ("kaula", 6378163.0, 298.24, None, "Kaula 1961"),
    ("lerch", 6378139.0, 298.257, None, "Lerch 1979"),
    ("mprts", 6397300.0, 191.0, None, "Maupertius 1738"),
    ("new_intl", 6378157.5, None, 6356772.2, "New International 1967"),
    ("plessis", 6376523.0, None, 6355863.0, "Plessis 1817 (France)"),
    ("SEasia", 6378155.0, None, 6356773.3205, "Southeast Asia"),
    ("walbeck", 6376896.0, None, 6355834.8467, "Walbeck"),
    ("WGS60", 6378165.0, 298.3, None, "WGS 60"),
    ("WGS66", 6378145.0, 298.25, None, "WGS 66"),
    ("WGS72", 6378135.0, 298.26, None, "WGS 72"),
    ("WGS84", 6378137.0, 298.257223563, None, "WGS 84"),
    ("sphere", 6370997.0, None, 6370997.0, "Normal Sphere (r=6370997)"),
)


@lru_cache(maxsize=1)
def _registry() -> Mapping[str, Ellipsoid]:
    """Build the read-only registry once, keyed by upper-case name."""
    table: dict[str, Ellipsoid] = {}
    for name, a, rf, b, description in _ELLIPSOID_TABLE:
        if rf is not None:
            ellipsoid = Ellipsoid(name=name, a=a, rf=rf, description=description)
        else:
            ellipsoid = Ellipsoid.from_semi_minor(name, a, b, description)
        table[name.upper()] = ellipsoid
    return MappingProxyType(table)


def lookup(name: str) -> Optional[Ellipsoid]:
    """
    Case-insensitive registry lookup.

    Args:
        name: Ellipsoid name, e.g. "WGS84", "clrk66", "merit"

    Returns:
        The registered Ellipsoid, or None for unknown names

    Examples:
        >>> lookup("MERIT") == lookup("merit")
        True
        >>> lookup("foobar") is None
        True
    """
    if not isinstance(name, str):
        return None
    return _registry().get(name.strip().upper())


def available_ellipsoids() -> tuple[str, ...]:
    """Registered ellipsoid names in table order."""
    return tuple(ellipsoid.name for ellipsoid in _registry().values())
