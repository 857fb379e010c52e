# ============================================================================
# MODULE CONTEXT - FEATURE PARAMS CONFIGURATION
# ============================================================================
# STATUS: Standalone Configuration - request parameter parsing
# PURPOSE: Paging limits and transform-function catalog for parameter parsing
# EXPORTS: FeatureParamsConfig, get_params_config, DEFAULT_TRANSFORM_FUNCTIONS
# INTERFACES: pydantic-settings BaseSettings
# DEPENDENCIES: pydantic, pydantic-settings
# SOURCE: Environment variables (FEATURES_ prefix) and optional .env file
# SCOPE: Read-only, process-wide settings consumed by the parsers
# VALIDATION: Pydantic v2 validation
# PATTERNS: Settings Pattern, Singleton via cached function
# ENTRY_POINTS: from feature_params.config import get_params_config
# ============================================================================

"""
Feature Params Configuration

Environment Variables (all optional):
    - FEATURES_LIMIT_DEFAULT: Page size when no limit is requested (default: 10)
    - FEATURES_LIMIT_MAX: Largest page size a client may request (default: 1000)
    - FEATURES_PRECISION_MAX: Upper clamp for the precision parameter (default: 20)
    - FEATURES_TRANSFORM_FUNCTIONS: Comma-separated geometry functions clients
      may apply through the transform parameter

The configuration is frozen after construction. Parsers receive it by
reference and never modify it.
"""

from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_TRANSFORM_FUNCTIONS = [
    "ST_Boundary",
    "ST_Centroid",
    "ST_Envelope",
    "ST_PointOnSurface",
    "ST_Buffer",
    "ST_ConvexHull",
    "ST_MinimumBoundingCircle",
    "ST_OffsetCurve",
    "ST_GeneratePoints",
    "ST_Simplify",
    "ST_ChaikinSmoothing",
    "ST_LineSubstring",
]


class FeatureParamsConfig(BaseSettings):
    """
    Paging and transform settings for request parameter parsing.

    Attributes:
        limit_default: Page size used when the request has no limit
        limit_max: Maximum page size, also the clamp target for bad limits
        precision_max: Upper clamp for coordinate precision
        transform_functions: Geometry functions allowed in transform
    """

    model_config = SettingsConfigDict(
        env_prefix="FEATURES_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    limit_default: int = Field(
        default=10,
        ge=0,
        description="Default number of features to return"
    )
    limit_max: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of features allowed per request"
    )
    precision_max: int = Field(
        default=20,
        ge=0,
        description="Largest coordinate precision a client may request"
    )
    transform_functions: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_TRANSFORM_FUNCTIONS),
        description="Function names accepted by the transform parameter"
    )

    @field_validator("transform_functions", mode="before")
    @classmethod
    def split_function_names(cls, v):
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @model_validator(mode="after")
    def validate_limits(self) -> "FeatureParamsConfig":
        """Ensure the default page size fits inside the maximum."""
        if self.limit_default > self.limit_max:
            raise ValueError(
                f"limit_default ({self.limit_default}) must not exceed "
                f"limit_max ({self.limit_max})"
            )
        return self


@lru_cache(maxsize=1)
def get_params_config() -> FeatureParamsConfig:
    """
    Get singleton configuration instance.

    Returns:
        FeatureParamsConfig: Validated configuration object

    Raises:
        ValidationError: If environment variables hold invalid values
    """
    return FeatureParamsConfig()
