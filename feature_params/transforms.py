# ============================================================================
# MODULE CONTEXT - TRANSFORM FUNCTIONS
# ============================================================================
# STATUS: Standalone - transform parameter parsing and whitelist resolution
# PURPOSE: Map user-supplied geometry function names to trusted canonical names
# EXPORTS: TransformWhitelist, get_transform_whitelist, parse_transform
# DEPENDENCIES: types, functools, util_logger
# SOURCE: Function-name catalog from FeatureParamsConfig.transform_functions
# SCOPE: Whitelist built once at startup, read-only afterwards
# VALIDATION: First unresolvable function name rejects the whole parameter
# ENTRY_POINTS: parse_transform(values, get_transform_whitelist())
# ============================================================================

"""
Transform Functions

transform=fun[,arg...][|fun[,arg...]...]

Function names are resolved against a whitelist before they can reach query
construction. Arguments are kept verbatim; the query layer binds them as
parameters.

Resolution order for a requested name:
    1. case-insensitive exact match             st_buffer -> ST_Buffer
    2. retry with the "st_" prefix if missing   buffer -> ST_Buffer
    3. otherwise InvalidParameterValue
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from util_logger import ComponentType, LoggerFactory

from .config import get_params_config
from .constants import (
    FUNCTION_PREFIX_ST,
    PARAM_TRANSFORM,
    TRANSFORM_FUN_SEP,
    TRANSFORM_PARAM_SEP,
)
from .errors import InvalidParameterValue
from .models import TransformFunction

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "TransformWhitelist")


class TransformWhitelist:
    """
    Immutable lowercase -> canonical function name mapping.

    Safe to share between concurrent requests; nothing mutates it after
    construction.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Mapping[str, str]):
        object.__setattr__(self, "_names", MappingProxyType(dict(names)))

    def __setattr__(self, key, value):
        raise AttributeError("TransformWhitelist is immutable")

    @classmethod
    def from_names(cls, fun_names: Iterable[str]) -> "TransformWhitelist":
        """Build a whitelist from canonical function names."""
        return cls({name.lower(): name for name in fun_names})

    @property
    def names(self) -> Mapping[str, str]:
        """Read-only view of lowercase -> canonical names."""
        return self._names

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"TransformWhitelist({sorted(self._names.values())!r})"

    def resolve(self, name: str) -> Optional[str]:
        """
        Convert an input function name to the canonical whitelist name.

        Returns:
            Canonical name, or None if the function is not allowed
        """
        name_low = name.lower()
        actual = self._names.get(name_low)
        if actual is not None:
            return actual
        if not name_low.startswith(FUNCTION_PREFIX_ST):
            # supply the st_ prefix and try again
            return self._names.get(FUNCTION_PREFIX_ST + name_low)
        return None


@lru_cache(maxsize=1)
def get_transform_whitelist() -> TransformWhitelist:
    """
    Get the process-wide whitelist built from configuration.

    Built on first use and cached; call during startup so request threads
    only ever read it.
    """
    names = get_params_config().transform_functions
    logger.info(f"Transform whitelist initialized with {len(names)} functions")
    return TransformWhitelist.from_names(names)


def _parse_transform_fun(definition: str) -> TransformFunction:
    atoms = definition.split(TRANSFORM_PARAM_SEP)
    return TransformFunction(name=atoms[0], args=atoms[1:])


def parse_transform(values: Mapping[str, str],
                    whitelist: TransformWhitelist) -> Optional[List[TransformFunction]]:
    """
    Parse the transform parameter into resolved functions.

    Args:
        values: Normalized parameter map
        whitelist: Allowed function names

    Returns:
        Functions in request order with canonical names, or None if absent

    Raises:
        InvalidParameterValue: For the first function name not in the whitelist
    """
    val = values.get(PARAM_TRANSFORM, "")
    if len(val) < 1:
        return None

    fun_list: List[TransformFunction] = []
    for definition in val.split(TRANSFORM_FUN_SEP):
        tf = _parse_transform_fun(definition)
        actual_name = whitelist.resolve(tf.name)
        if not actual_name:
            raise InvalidParameterValue(PARAM_TRANSFORM, tf.name)
        fun_list.append(tf.model_copy(update={"name": actual_name}))
    return fun_list
