"""
Query parameter names and separators recognized by the features API.

All names are lowercase; incoming names are lowercased before lookup.
"""

PARAM_LIMIT = "limit"
PARAM_OFFSET = "offset"
PARAM_BBOX = "bbox"
PARAM_BBOX_CRS = "bbox-crs"
PARAM_CRS = "crs"
PARAM_PROPERTIES = "properties"
PARAM_ORDER_BY = "orderby"
PARAM_SORT_BY = "sortby"
PARAM_PRECISION = "precision"
PARAM_TRANSFORM = "transform"
PARAM_FILTER = "filter"
PARAM_FILTER_CRS = "filter-crs"
PARAM_GROUP_BY = "groupby"
PARAM_FORMAT = "f"

# Names the API surface interprets itself; never treated as column filters
RESERVED_PARAMETER_NAMES = frozenset([
    PARAM_LIMIT,
    PARAM_OFFSET,
    PARAM_BBOX,
    PARAM_BBOX_CRS,
    PARAM_CRS,
    PARAM_PROPERTIES,
    PARAM_ORDER_BY,
    PARAM_SORT_BY,
    PARAM_PRECISION,
    PARAM_TRANSFORM,
    PARAM_FILTER,
    PARAM_FILTER_CRS,
    PARAM_GROUP_BY,
    PARAM_FORMAT,
])

ORDER_BY_DIR_SEP = ":"
ORDER_BY_DIR_ASC = "a"
ORDER_BY_DIR_DESC = "d"

TRANSFORM_FUN_SEP = "|"
TRANSFORM_PARAM_SEP = ","
FUNCTION_PREFIX_ST = "st_"

PRECISION_MIN = 0
PRECISION_UNSET = -1


def is_reserved_parameter(name: str) -> bool:
    """True if the (case-insensitive) name is interpreted by the API itself."""
    return name.lower() in RESERVED_PARAMETER_NAMES
