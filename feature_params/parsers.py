# ============================================================================
# MODULE CONTEXT - REQUEST PARAMETER PARSERS
# ============================================================================
# STATUS: Standalone Parsers - query string -> RequestParameters
# PURPOSE: Interpret raw, untrusted query-string arguments
# EXPORTS: extract_single_args, query_args_from_url, parse_int, parse_limit,
#          parse_bbox, parse_properties, parse_order_by, parse_request_params
# DEPENDENCIES: re, math, urllib.parse, logging
# SCOPE: Pure functions; no I/O, no shared mutable state
# VALIDATION: InvalidParameterValue on malformed values, clamping otherwise
# ENTRY_POINTS: from feature_params.parsers import parse_request_params
# ============================================================================

"""
Request Parameter Parsers

Each parser reads one parameter from the normalized name -> value map and
either returns a value or raises InvalidParameterValue. Parsers are
independent of each other; parse_request_params runs them in a fixed order
and stops at the first error.

Query parameters (names are case-insensitive):
    limit       page size (default and max from configuration)
    offset      features to skip, clamped to [0, limit_max]
    bbox        minLon,minLat,maxLon,maxLat
    properties  comma-separated output columns
    orderby     column[:a|:d]
    precision   coordinate decimals, clamped to [0, 20]
    transform   fun[,arg...][|fun[,arg...]...]
"""

import logging
import math
import re
from typing import Dict, List, Mapping, Optional, Sequence, Union
from urllib.parse import parse_qs, urlparse

from .config import FeatureParamsConfig, get_params_config
from .constants import (
    ORDER_BY_DIR_ASC,
    ORDER_BY_DIR_DESC,
    ORDER_BY_DIR_SEP,
    PARAM_BBOX,
    PARAM_LIMIT,
    PARAM_OFFSET,
    PARAM_ORDER_BY,
    PARAM_PRECISION,
    PARAM_PROPERTIES,
    PRECISION_MIN,
    PRECISION_UNSET,
)
from .errors import InvalidParameterValue
from .models import (
    Extent,
    Ordering,
    PropertiesEmpty,
    PropertiesUnset,
    PropertyNames,
    PropertySelection,
    RequestParameters,
)
from .transforms import TransformWhitelist, get_transform_whitelist, parse_transform

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"(?P<sign>[+-]?)0*(?P<digits>[1-9][0-9]*|0)")
_INT64_MIN = -2**63
_INT64_MAX = 2**63 - 1
_INT64_DIGITS = len(str(_INT64_MAX))

# ASCII decimal floats plus inf/infinity/nan; no whitespace or underscores
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?)|nan",
    re.IGNORECASE
)

QueryArgs = Mapping[str, Union[str, Sequence[str]]]


# ============================================================================
# ARGUMENT NORMALIZER
# ============================================================================

def query_args_from_url(url: str) -> Dict[str, List[str]]:
    """
    Split the query part of a URL (or a bare query string) into a
    multi-valued mapping. Blank values are kept so that ``properties=``
    is distinguishable from an absent parameter.
    """
    if "?" in url or "://" in url or url.startswith("/"):
        query = urlparse(url).query
    else:
        query = url
    return parse_qs(query, keep_blank_values=True)


def extract_single_args(query_args: QueryArgs) -> Dict[str, str]:
    """
    Collapse multi-valued query arguments into lowercased name -> one value.

    The first value of the first occurrence of a name wins. Values keep
    their case.
    """
    values: Dict[str, str] = {}
    for key_raw, raw in query_args.items():
        key = key_raw.lower()
        if key in values:
            continue
        if isinstance(raw, str):
            values[key] = raw
        else:
            values[key] = raw[0] if len(raw) > 0 else ""
    return values


# ============================================================================
# SCALAR PARSERS
# ============================================================================

def _to_int(key: str, val: str) -> int:
    """Signed 64-bit integer, or InvalidParameterValue."""
    match = _INT_PATTERN.fullmatch(val)
    if not match or len(match.group("digits")) > _INT64_DIGITS:
        raise InvalidParameterValue(key, val)
    num = int(match.group("sign") + match.group("digits"))
    if num < _INT64_MIN or num > _INT64_MAX:
        raise InvalidParameterValue(key, val)
    return num


def _to_float(val: str) -> float:
    """Strict ASCII float; raises ValueError on anything else."""
    if not _FLOAT_PATTERN.fullmatch(val):
        raise ValueError(val)
    num = float(val)
    # finite literal that overflowed
    if math.isinf(num) and "inf" not in val.lower():
        raise ValueError(val)
    return num


def parse_int(values: Mapping[str, str], key: str,
              min_val: int, max_val: int, default_val: int) -> int:
    """
    Parse a bounded integer parameter.

    Absent or empty returns ``default_val``. Out-of-range values are clamped
    to ``[min_val, max_val]`` without error.

    Raises:
        InvalidParameterValue: If the value is not a 64-bit integer
    """
    val_str = values.get(key, "")
    if len(val_str) < 1:
        return default_val
    val = _to_int(key, val_str)
    if val < min_val:
        val = min_val
    if val > max_val:
        val = max_val
    return val


def parse_limit(values: Mapping[str, str],
                config: Optional[FeatureParamsConfig] = None) -> int:
    """
    Parse the limit parameter.

    Unlike parse_int, a negative limit is clamped to the configured maximum,
    the same as a limit above it.

    Raises:
        InvalidParameterValue: If the value is not a 64-bit integer
    """
    config = config or get_params_config()
    val = values.get(PARAM_LIMIT, "")
    if len(val) < 1:
        return config.limit_default
    limit = _to_int(PARAM_LIMIT, val)
    if limit < 0 or limit > config.limit_max:
        limit = config.limit_max
    return limit


# ============================================================================
# STRUCTURED PARSERS
# ============================================================================

def parse_bbox(values: Mapping[str, str]) -> Optional[Extent]:
    """
    Parse bbox=minLon,minLat,maxLon,maxLat.

    Returns None when absent. No range or min/max ordering checks are made.

    Raises:
        InvalidParameterValue: On wrong element count or a non-numeric element
    """
    val = values.get(PARAM_BBOX, "")
    if len(val) < 1:
        return None
    nums = val.split(",")
    if len(nums) != 4:
        raise InvalidParameterValue(PARAM_BBOX, val)
    try:
        minx, miny, maxx, maxy = (_to_float(n) for n in nums)
    except ValueError:
        raise InvalidParameterValue(PARAM_BBOX, val) from None
    return Extent(minx=minx, miny=miny, maxx=maxx, maxy=maxy)


def parse_properties(values: Mapping[str, str]) -> PropertySelection:
    """
    Parse the properties parameter into a projection selection.

    absent -> PropertiesUnset, empty -> PropertiesEmpty, otherwise the raw
    comma-separated names (no dedup, no case folding).
    """
    if PARAM_PROPERTIES not in values:
        return PropertiesUnset()
    val = values[PARAM_PROPERTIES]
    if len(val) < 1:
        return PropertiesEmpty()
    return PropertyNames(names=val.split(","))


def _parse_order_by_dir(direction: str) -> bool:
    if direction == ORDER_BY_DIR_DESC:
        return True
    if direction == ORDER_BY_DIR_ASC:
        return False
    raise InvalidParameterValue(PARAM_ORDER_BY, direction)


def parse_order_by(values: Mapping[str, str]) -> List[Ordering]:
    """
    Parse orderby=column[:a|:d] into at most one Ordering.

    The whole value is lowercased. No direction means ascending.

    Raises:
        InvalidParameterValue: If the direction is neither "a" nor "d"
    """
    order_by: List[Ordering] = []
    val = values.get(PARAM_ORDER_BY, "")
    if len(val) < 1:
        return order_by
    name_dir = val.lower().split(ORDER_BY_DIR_SEP)
    is_desc = False
    if len(name_dir) >= 2:
        is_desc = _parse_order_by_dir(name_dir[1])
    order_by.append(Ordering(name=name_dir[0], is_desc=is_desc))
    return order_by


# ============================================================================
# FULL REQUEST PARSE
# ============================================================================

def parse_request_params(query_args: QueryArgs,
                         config: Optional[FeatureParamsConfig] = None,
                         whitelist: Optional[TransformWhitelist] = None) -> RequestParameters:
    """
    Parse all recognized parameters of one request.

    Args:
        query_args: Raw multi-valued query arguments
        config: Paging configuration (singleton if not provided)
        whitelist: TransformWhitelist (built from config if not provided)

    Returns:
        RequestParameters with the normalized raw map retained

    Raises:
        InvalidParameterValue: For the first malformed parameter found
    """
    if whitelist is None:
        whitelist = (get_transform_whitelist() if config is None
                     else TransformWhitelist.from_names(config.transform_functions))
    config = config or get_params_config()

    values = extract_single_args(query_args)
    logger.debug(f"Parsing request parameters: {sorted(values)}")

    return RequestParameters(
        limit=parse_limit(values, config),
        offset=parse_int(values, PARAM_OFFSET, 0, config.limit_max, 0),
        bbox=parse_bbox(values),
        properties=parse_properties(values),
        order_by=parse_order_by(values),
        precision=parse_int(values, PARAM_PRECISION, PRECISION_MIN,
                            config.precision_max, PRECISION_UNSET),
        transform_funs=parse_transform(values, whitelist),
        values=values,
    )
