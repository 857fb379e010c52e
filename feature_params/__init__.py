# ============================================================================
# MODULE CONTEXT - FEATURE PARAMS MODULE
# ============================================================================
# STATUS: Standalone Module - request parameter parsing for feature queries
# PURPOSE: Validate raw query-string arguments into a typed query descriptor
# EXPORTS: FeatureParamsService, FeatureParamsConfig, get_params_config,
#          get_params_triggers, InvalidParameterValue, QueryParameters,
#          RequestParameters, TransformWhitelist
# INTERFACES: Standalone - column names and query execution are injected
# PYDANTIC_MODELS: RequestParameters, QueryParameters, Extent, Ordering
# DEPENDENCIES: pydantic, pydantic-settings, azure-functions
# SOURCE: Environment variables for paging limits and transform functions
# SCOPE: The only validation boundary before values reach query construction
# VALIDATION: InvalidParameterValue for malformed values, clamping for ranges
# PATTERNS: Service Layer, Standalone Module
# ENTRY_POINTS: from feature_params import FeatureParamsService
# ============================================================================

"""
Feature Params - Standalone Module

Turns the query string of an OGC API - Features items request into the
QueryParameters value the query execution layer consumes.

Architecture:
    feature_params/
    ├── config.py      # Environment-based configuration
    ├── constants.py   # Recognized parameter names and separators
    ├── errors.py      # InvalidParameterValue
    ├── models.py      # Pydantic models (request / query descriptors)
    ├── parsers.py     # Per-parameter parsers
    ├── transforms.py  # Transform function whitelist
    ├── assembler.py   # Projection and filter resolution
    ├── service.py     # Orchestration layer
    └── triggers.py    # Azure Functions HTTP handlers

Usage:
    from feature_params import FeatureParamsService

    service = FeatureParamsService()
    query = service.parse_query(
        {"limit": ["50"], "properties": ["name,status"]},
        ["id", "name", "status"]
    )
"""

from .config import FeatureParamsConfig, get_params_config
from .errors import InvalidParameterValue
from .models import QueryParameters, RequestParameters
from .service import FeatureParamsService
from .transforms import TransformWhitelist, get_transform_whitelist
from .triggers import get_params_triggers

__version__ = "1.0.0"
__all__ = [
    "FeatureParamsConfig",
    "FeatureParamsService",
    "InvalidParameterValue",
    "QueryParameters",
    "RequestParameters",
    "TransformWhitelist",
    "get_params_config",
    "get_params_triggers",
    "get_transform_whitelist",
]
