# ============================================================================
# MODULE CONTEXT - FEATURE PARAMS SERVICE
# ============================================================================
# STATUS: Standalone Service - request parameters -> query descriptor
# PURPOSE: Orchestrate parsing and assembly for the items endpoint
# EXPORTS: FeatureParamsService
# DEPENDENCIES: util_logger, feature_params.*
# SOURCE: Raw query arguments from the trigger layer, column names from the caller
# SCOPE: Stateless per request; holds only frozen config and whitelist
# VALIDATION: InvalidParameterValue propagates to the trigger layer
# PATTERNS: Service Layer, Facade Pattern
# ENTRY_POINTS: service = FeatureParamsService(); query = service.parse_query(args, cols)
# ============================================================================

"""
Feature Params Service

Facade over the parsers and the assembler. The trigger layer hands it the
raw query arguments of a request; the service returns a QueryParameters
value for the query execution layer or raises InvalidParameterValue, which
the trigger layer turns into a 400 response.
"""

from typing import Optional, Sequence

from util_logger import ComponentType, LoggerFactory, log_exceptions

from .assembler import create_query_params
from .config import FeatureParamsConfig, get_params_config
from .errors import InvalidParameterValue
from .models import QueryParameters, RequestParameters
from .parsers import QueryArgs, parse_request_params
from .transforms import TransformWhitelist, get_transform_whitelist

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "FeatureParamsService")


class FeatureParamsService:
    """
    Parses and assembles request parameters for feature queries.

    Responsibilities:
    - Parse raw query arguments into RequestParameters (fail-fast)
    - Resolve projection and ad-hoc filters against a column catalog
    - Log rejected parameters with structured dimensions
    """

    def __init__(self,
                 config: Optional[FeatureParamsConfig] = None,
                 whitelist: Optional[TransformWhitelist] = None):
        """
        Initialize service with configuration.

        Args:
            config: Paging configuration (uses singleton if not provided)
            whitelist: Transform whitelist (built from config if not provided)
        """
        if whitelist is None:
            whitelist = (get_transform_whitelist() if config is None
                         else TransformWhitelist.from_names(config.transform_functions))
        self.config = config or get_params_config()
        self.whitelist = whitelist
        logger.info(
            "FeatureParamsService initialized",
            extra={'custom_dimensions': {
                'limit_default': self.config.limit_default,
                'limit_max': self.config.limit_max,
                'transform_functions': len(self.whitelist)
            }}
        )

    @log_exceptions(ComponentType.SERVICE, "FeatureParamsService",
                    ignore=(InvalidParameterValue,))
    def parse(self, query_args: QueryArgs) -> RequestParameters:
        """
        Parse the recognized parameters of a request.

        Raises:
            InvalidParameterValue: For the first malformed parameter
        """
        try:
            return parse_request_params(query_args, self.config, self.whitelist)
        except InvalidParameterValue as e:
            logger.warning(
                f"Rejected request parameter: {e}",
                extra={'custom_dimensions': {
                    'parameter': e.parameter,
                    'value': e.value
                }}
            )
            raise

    def build_query(self, request_params: RequestParameters,
                    col_names: Sequence[str]) -> QueryParameters:
        """
        Assemble the query descriptor for a collection's columns.

        Args:
            request_params: Result of parse()
            col_names: Ordered column names of the target collection

        Returns:
            QueryParameters for the query execution layer
        """
        query = create_query_params(request_params, col_names)
        logger.debug(
            "Query parameters assembled",
            extra={'custom_dimensions': {
                'limit': query.limit,
                'offset': query.offset,
                'columns': len(query.columns),
                'filters': len(query.filters)
            }}
        )
        return query

    def parse_query(self, query_args: QueryArgs,
                    col_names: Sequence[str]) -> QueryParameters:
        """Parse a request and assemble its query descriptor in one step."""
        return self.build_query(self.parse(query_args), col_names)
