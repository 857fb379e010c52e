"""
Query Parameter Assembly

Turns RequestParameters into the QueryParameters handed to the query
execution layer, once the target collection's column names are known.
Nothing here raises: malformed values were rejected by the parsers, and
unknown property or filter names are dropped.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Sequence

from .constants import is_reserved_parameter
from .models import (
    FilterCondition,
    PropertiesEmpty,
    PropertiesUnset,
    PropertySelection,
    QueryParameters,
    RequestParameters,
)

logger = logging.getLogger(__name__)


def _to_name_set(names: Iterable[str]) -> set:
    return {name.lower() for name in names}


def _column_name_map(col_names: Iterable[str]) -> Dict[str, str]:
    """Lowercase -> catalog column name; first spelling wins."""
    name_map: Dict[str, str] = {}
    for col_name in col_names:
        name_map.setdefault(col_name.lower(), col_name)
    return name_map


def normalize_prop_names(requested: PropertySelection,
                         col_names: Sequence[str]) -> List[str]:
    """
    Resolve the requested projection against the catalog's columns.

    - PropertiesUnset: every column, in catalog order
    - PropertiesEmpty: no columns
    - PropertyNames: catalog columns whose name case-insensitively matches
      a requested name, in catalog order; unknown names are dropped
    """
    if isinstance(requested, PropertiesUnset):
        return list(col_names)
    if isinstance(requested, PropertiesEmpty):
        return []
    name_set = _to_name_set(requested.names)
    return [col_name for col_name in col_names if col_name.lower() in name_set]


def parse_filter(values: Mapping[str, str],
                 col_names: Iterable[str]) -> List[FilterCondition]:
    """
    Create equality filters from query parameters that name a column.

    Reserved parameter names and names matching no column are ignored.
    The order of the returned conditions carries no meaning.
    """
    col_name_map = _column_name_map(col_names)
    conds: List[FilterCondition] = []
    for name, val in values.items():
        if is_reserved_parameter(name):
            continue
        col_name = col_name_map.get(name.lower())
        if col_name is not None:
            logger.debug(f"Adding filter {col_name} = {val}")
            conds.append(FilterCondition(name=col_name, value=val))
    return conds


def create_query_params(request_params: RequestParameters,
                        col_names: Sequence[str]) -> QueryParameters:
    """
    Assemble the query descriptor for one collection.

    Args:
        request_params: Output of parse_request_params
        col_names: Authoritative, ordered column names of the collection

    Returns:
        QueryParameters with concrete columns and ad-hoc filters
    """
    return QueryParameters(
        limit=request_params.limit,
        offset=request_params.offset,
        bbox=request_params.bbox,
        columns=normalize_prop_names(request_params.properties, col_names),
        order_by=request_params.order_by,
        precision=request_params.precision,
        transform_funs=request_params.transform_funs,
        filters=parse_filter(request_params.values, col_names),
    )
