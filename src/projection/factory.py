"""
Projection Factory: parameter tokens -> ready-to-use Projection

Resolution order:
1. ParameterSet from the tokens (strict numeric parsing when configured)
2. `proj` -> registered family, otherwise UnknownFamily
3. datum: `towgs84=` values or a registered `datum=` name
4. ellipsoid: `ellps`, then `a` with `rf`/`f`/`b`/`es`, then `R` (sphere),
   then the datum's ellipsoid, then the configured default, otherwise
   MissingEllipsoid
5. family constructor, which validates its own parameters

The factory either returns a fully constructed projection or raises; it
never hands out a partially built instance.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from src.core.contracts.validators import definition_to_tokens, validate_projection_definition
from src.core.domain.datum import Datum, lookup_datum
from src.core.domain.ellipsoid import Ellipsoid, lookup
from src.core.domain.parameters import ParameterSet
from src.core.errors import InvalidParameterCombination, MissingEllipsoid, UnknownFamily
from src.projection.base import Projection
from src.projection.families import available_families as _registered_families
from src.projection.families import lookup_family

logger = logging.getLogger(__name__)

CUSTOM_ELLIPSOID_NAME = "custom"


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class ProjectionConfig:
    """
    Factory configuration.

    default_ellipsoid: registry name used when the parameters name no
        ellipsoid (None: MissingEllipsoid is raised instead)
    strict_numeric: malformed numeric parameters raise
        InvalidParameterCombination instead of reading as zero
    """

    default_ellipsoid: Optional[str] = None
    strict_numeric: bool = False


# =============================================================================
# FACTORY
# =============================================================================


class ProjectionFactory:
    """
    Builds Projection instances from `key=value` / flag tokens.

    Examples:
        >>> factory = ProjectionFactory()
        >>> utm = factory.create(["proj=utm", "zone=33", "ellps=WGS84"])
        >>> utm.name, utm.zone
        ('utm', 33)
    """

    def __init__(self, config: Optional[ProjectionConfig] = None):
        """
        Args:
            config: Factory configuration (default: ProjectionConfig())
        """
        self.config = config or ProjectionConfig()

    def create(self, tokens: Iterable[str]) -> Projection:
        """
        Build a projection from parameter tokens.

        Args:
            tokens: e.g. ["proj=aea", "lat_1=20", "lat_2=20", "ellps=clrk66"]

        Returns:
            Fully constructed, immutable Projection

        Raises:
            UnknownFamily: `proj` missing or not registered
            MissingEllipsoid: No ellipsoid could be resolved
            InvalidParameterCombination: Malformed tokens, or family or ellipsoid
                constraints violated
        """
        if isinstance(tokens, str):
            raise TypeError("tokens must be a sequence of strings; use create_from_string for proj text")

        try:
            params = ParameterSet(tokens, strict=self.config.strict_numeric)
        except ValueError as exc:
            raise InvalidParameterCombination(f"malformed parameter list: {exc}") from exc

        family_name = params.string("proj")
        if not family_name:
            raise UnknownFamily("missing 'proj' parameter")
        family = lookup_family(family_name)
        if family is None:
            raise UnknownFamily(f"unknown projection family: {family_name!r}")

        datum = self._resolve_datum(params)
        ellipsoid = self._resolve_ellipsoid(params, datum)

        try:
            projection = family(params, ellipsoid, datum)
        except (ValueError, ZeroDivisionError) as exc:
            raise InvalidParameterCombination(f"invalid parameters for {family_name}: {exc}") from exc

        logger.debug(
            "Created %s projection on %s (datum=%s)",
            projection.name,
            ellipsoid.name,
            datum.name if datum else None,
        )
        return projection

    def create_from_string(self, text: str) -> Projection:
        """
        Build a projection from proj string text.

        Examples:
            >>> ProjectionFactory().create_from_string("+proj=merc +ellps=WGS84").name
            'merc'
        """
        return self.create(text.split())

    def create_from_mapping(self, definition: Mapping[str, Any]) -> Projection:
        """
        Build a projection from a JSON-compatible mapping.

        The mapping is validated against the projection_definition contract
        first; contract violations raise jsonschema's ValidationError.
        """
        data = dict(definition)
        validate_projection_definition(data)
        return self.create(definition_to_tokens(data))

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def _resolve_datum(self, params: ParameterSet) -> Optional[Datum]:
        if params.contains("nadgrids"):
            raise InvalidParameterCombination("grid shift datums (nadgrids) are not supported")

        if params.contains("towgs84"):
            name = params.string("datum") or "custom"
            try:
                return Datum(name=name, towgs84=params.try_float_list("towgs84"))
            except ValueError as exc:
                raise InvalidParameterCombination(f"invalid towgs84: {params.string('towgs84')!r}") from exc

        if params.contains("datum"):
            name = params.string("datum") or ""
            datum = lookup_datum(name)
            if datum is None:
                raise InvalidParameterCombination(f"unknown datum: {name!r}")
            return datum

        return None

    def _resolve_ellipsoid(self, params: ParameterSet, datum: Optional[Datum]) -> Ellipsoid:
        if params.contains("ellps"):
            ellipsoid = lookup(params.string("ellps") or "")
            if ellipsoid is not None:
                return ellipsoid

        try:
            if params.contains("a"):
                ellipsoid = self._ad_hoc_ellipsoid(params)
                if ellipsoid is not None:
                    return ellipsoid
            if params.contains("R"):
                return Ellipsoid.sphere(CUSTOM_ELLIPSOID_NAME, params.try_float("R"))
        except ValueError as exc:
            raise InvalidParameterCombination(f"invalid ellipsoid parameters: {exc}") from exc

        if datum is not None and datum.ellipsoid_name:
            ellipsoid = lookup(datum.ellipsoid_name)
            if ellipsoid is not None:
                return ellipsoid

        if self.config.default_ellipsoid:
            ellipsoid = lookup(self.config.default_ellipsoid)
            if ellipsoid is not None:
                logger.debug("No ellipsoid given, using default %s", ellipsoid.name)
                return ellipsoid

        if params.contains("ellps"):
            raise MissingEllipsoid(f"unknown ellipsoid: {params.string('ellps')!r}")
        raise MissingEllipsoid("no ellipsoid: give ellps=, a= with rf=/f=/b=/es=, or R=")

    @staticmethod
    def _ad_hoc_ellipsoid(params: ParameterSet) -> Optional[Ellipsoid]:
        """Ellipsoid from a + one shape parameter, None if no shape is given."""
        a = params.try_float("a")
        if params.contains("rf"):
            return Ellipsoid(name=CUSTOM_ELLIPSOID_NAME, a=a, rf=params.try_float("rf"))
        if params.contains("f"):
            return Ellipsoid.from_flattening(CUSTOM_ELLIPSOID_NAME, a, params.try_float("f"))
        if params.contains("b"):
            return Ellipsoid.from_semi_minor(CUSTOM_ELLIPSOID_NAME, a, params.try_float("b"))
        if params.contains("es"):
            return Ellipsoid.from_eccentricity_squared(CUSTOM_ELLIPSOID_NAME, a, params.try_float("es"))
        return None


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_DEFAULT_FACTORY = ProjectionFactory()


def create_projection(tokens: Iterable[str]) -> Projection:
    """Build a projection with the default factory configuration."""
    return _DEFAULT_FACTORY.create(tokens)


def available_families() -> tuple[str, ...]:
    """Names accepted by the `proj` parameter."""
    return _registered_families()
