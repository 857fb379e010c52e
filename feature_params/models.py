# ============================================================================
# MODULE CONTEXT - FEATURE PARAMS MODELS
# ============================================================================
# STATUS: Standalone Models - parsed request and query descriptors
# PURPOSE: Typed values handed from parameter parsing to query execution
# EXPORTS: Extent, Ordering, TransformFunction, FilterCondition,
#          PropertiesUnset, PropertiesEmpty, PropertyNames, PropertySelection,
#          RequestParameters, QueryParameters
# INTERFACES: Pydantic BaseModel (frozen)
# DEPENDENCIES: pydantic, typing
# SCOPE: In-process contract, no wire format of its own
# VALIDATION: Pydantic v2 validation
# PATTERNS: Data Transfer Objects (DTOs), tagged union for projection
# ENTRY_POINTS: from feature_params.models import QueryParameters
# ============================================================================

"""
Feature Params Models

Every model is created fresh per request and frozen, so two parses of the
same query string compare equal.

The requested projection is a tagged union rather than an optional list:

    PropertiesUnset        no properties parameter -> all columns
    PropertiesEmpty        properties= (empty)     -> no columns
    PropertyNames(names)   properties=a,b          -> listed columns only
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Extent(_FrozenModel):
    """
    Axis-aligned bounding box.

    No ordering is enforced between min and max; inverted or degenerate
    boxes are passed through unchanged.
    """
    minx: float = Field(description="Minimum longitude / x")
    miny: float = Field(description="Minimum latitude / y")
    maxx: float = Field(description="Maximum longitude / x")
    maxy: float = Field(description="Maximum latitude / y")

    def as_list(self) -> List[float]:
        """Return [minx, miny, maxx, maxy]."""
        return [self.minx, self.miny, self.maxx, self.maxy]

    @property
    def bbox_wkt(self) -> str:
        """Convert bbox to EWKT envelope for PostGIS."""
        minx, miny, maxx, maxy = self.as_list()
        return (
            f"SRID=4326;POLYGON(({minx} {miny},{maxx} {miny},"
            f"{maxx} {maxy},{minx} {maxy},{minx} {miny}))"
        )


class Ordering(_FrozenModel):
    """Single sort key."""
    name: str = Field(description="Column name (lowercased)")
    is_desc: bool = Field(default=False, description="True for descending order")


class TransformFunction(_FrozenModel):
    """Geometry function applied to the output geometry."""
    name: str = Field(description="Canonical function name from the whitelist")
    args: List[str] = Field(
        default_factory=list,
        description="Raw argument strings, in request order"
    )


class FilterCondition(_FrozenModel):
    """Equality condition derived from an ad-hoc query parameter."""
    name: str = Field(description="Column name as it appears in the catalog")
    value: str = Field(description="Raw value to compare against")


# ============================================================================
# PROJECTION - three-valued properties selection
# ============================================================================

class PropertiesUnset(_FrozenModel):
    """No properties parameter: project every column."""
    kind: Literal["unset"] = "unset"


class PropertiesEmpty(_FrozenModel):
    """properties parameter present but empty: project no columns."""
    kind: Literal["empty"] = "empty"


class PropertyNames(_FrozenModel):
    """Explicit list of requested property names, as sent."""
    kind: Literal["names"] = "names"
    names: List[str] = Field(min_length=1, description="Raw requested names")


PropertySelection = Annotated[
    Union[PropertiesUnset, PropertiesEmpty, PropertyNames],
    Field(discriminator="kind")
]


# ============================================================================
# REQUEST / QUERY DESCRIPTORS
# ============================================================================

class RequestParameters(_FrozenModel):
    """
    Parsed, request-scoped parameters.

    ``values`` keeps the normalized raw map so ad-hoc filters can be
    extracted once the collection's columns are known.
    """
    limit: int = Field(description="Page size after clamping")
    offset: int = Field(default=0, description="Number of features to skip")
    bbox: Optional[Extent] = Field(default=None, description="Spatial filter")
    properties: PropertySelection = Field(
        default_factory=PropertiesUnset,
        description="Requested projection"
    )
    order_by: List[Ordering] = Field(
        default_factory=list,
        description="Zero or one sort key"
    )
    precision: int = Field(default=-1, description="Coordinate precision, -1 if unset")
    transform_funs: Optional[List[TransformFunction]] = Field(
        default=None,
        description="Geometry transforms in application order"
    )
    values: Dict[str, str] = Field(
        default_factory=dict,
        description="Lowercased parameter name -> single raw value"
    )


class QueryParameters(_FrozenModel):
    """
    Final descriptor consumed by the query execution layer.

    ``columns`` is always concrete. Filter order carries no meaning.
    """
    limit: int
    offset: int = 0
    bbox: Optional[Extent] = None
    columns: List[str] = Field(default_factory=list)
    order_by: List[Ordering] = Field(default_factory=list)
    precision: int = -1
    transform_funs: Optional[List[TransformFunction]] = None
    filters: List[FilterCondition] = Field(default_factory=list)
