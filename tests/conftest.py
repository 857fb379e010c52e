"""
Shared test fixtures.

Configuration is built explicitly so tests never depend on the
environment of the machine running them.
"""

import os

import pytest

from feature_params.config import FeatureParamsConfig, get_params_config
from feature_params.service import FeatureParamsService
from feature_params.transforms import TransformWhitelist, get_transform_whitelist


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop FEATURES_* variables and reset the cached singletons."""
    for key in list(os.environ):
        if key.upper().startswith("FEATURES_"):
            monkeypatch.delenv(key, raising=False)
    get_params_config.cache_clear()
    get_transform_whitelist.cache_clear()
    yield
    get_params_config.cache_clear()
    get_transform_whitelist.cache_clear()


@pytest.fixture
def config():
    """Paging limits matching the documented defaults."""
    return FeatureParamsConfig(
        limit_default=10,
        limit_max=1000,
        transform_functions=["ST_Buffer", "ST_Centroid", "ST_Simplify", "ST_PointOnSurface"],
    )


@pytest.fixture
def whitelist(config):
    return TransformWhitelist.from_names(config.transform_functions)


@pytest.fixture
def columns():
    """Column catalog of a small roads collection, in table order."""
    return ["id", "name", "status", "lanes"]


@pytest.fixture
def service(config, whitelist):
    return FeatureParamsService(config, whitelist)
