# ============================================================================
# MODULE CONTEXT - FEATURE PARAMS TRIGGERS
# ============================================================================
# STATUS: HTTP adapter - Azure Functions request -> QueryParameters
# PURPOSE: Bridge Azure Functions HTTP requests to parameter parsing
# EXPORTS: request_query_args, BaseParamsTrigger, FeatureItemsTrigger, get_params_triggers
# INTERFACES: Azure Functions HttpRequest/HttpResponse
# DEPENDENCIES: azure.functions, json, util_logger
# SOURCE: HTTP requests from clients (Leaflet, QGIS, curl)
# SCOPE: Parameter errors -> 400; query execution is delegated
# PATTERNS: Trigger Pattern, Factory Pattern (get_params_triggers)
# ENTRY_POINTS: Function App route registration via get_params_triggers()
# ============================================================================

"""
Feature Params HTTP Triggers

The items trigger parses the request's query string, resolves it against the
collection's columns and passes the resulting QueryParameters to the query
execution layer, which builds the response.

Collaborators are injected:
    column_catalog(collection_id) -> ordered column names
        raises ValueError for an unknown collection
    query_handler(collection_id, QueryParameters) -> func.HttpResponse

Integration:
    In function_app.py:

    from feature_params import get_params_triggers

    for trigger in get_params_triggers(column_catalog, query_handler):
        app.route(
            route=trigger['route'],
            methods=trigger['methods'],
            auth_level=func.AuthLevel.ANONYMOUS
        )(trigger['handler'])
"""

import json
from typing import Any, Callable, Dict, List, Optional, Sequence

import azure.functions as func

from util_logger import ComponentType, LoggerFactory

from .errors import InvalidParameterValue
from .models import QueryParameters
from .parsers import query_args_from_url
from .service import FeatureParamsService

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "FeatureParamsTriggers")

ColumnCatalog = Callable[[str], Sequence[str]]
QueryHandler = Callable[[str, QueryParameters], func.HttpResponse]


def request_query_args(req: func.HttpRequest) -> Dict[str, List[str]]:
    """
    Multi-valued query arguments of a request.

    Read from the request URL so repeated and blank parameters survive;
    anything only present in ``req.params`` is added after.
    """
    args = query_args_from_url(req.url or "")
    for key, value in req.params.items():
        if key not in args:
            args[key] = [value]
    return args


def get_params_triggers(column_catalog: ColumnCatalog,
                        query_handler: QueryHandler,
                        service: Optional[FeatureParamsService] = None) -> List[Dict[str, Any]]:
    """
    Get trigger configurations for function_app.py.

    Returns:
        List of dicts with keys:
        - route: URL route pattern
        - methods: List of HTTP methods
        - handler: Callable trigger handler
    """
    return [
        {
            'route': 'features/collections/{collection_id}/items',
            'methods': ['GET'],
            'handler': FeatureItemsTrigger(column_catalog, query_handler, service).handle
        }
    ]


# ============================================================================
# BASE TRIGGER CLASS
# ============================================================================

class BaseParamsTrigger:
    """
    Base class for parameter-parsing triggers.

    Provides JSON error responses and the shared service.
    """

    def __init__(self, service: Optional[FeatureParamsService] = None):
        self.service = service or FeatureParamsService()

    def _error_response(
        self,
        message: str,
        status_code: int = 400,
        error_type: str = "BadRequest",
        **details: Any
    ) -> func.HttpResponse:
        """
        Create error response.

        Args:
            message: Error message
            status_code: HTTP status code
            error_type: Error type string
            details: Extra fields for the error body

        Returns:
            Azure Functions HttpResponse with error JSON
        """
        error_body = {
            "code": error_type,
            "description": message,
            **details
        }
        return func.HttpResponse(
            body=json.dumps(error_body, indent=2),
            status_code=status_code,
            mimetype="application/json"
        )

    def _invalid_parameter_response(self, err: InvalidParameterValue) -> func.HttpResponse:
        body = err.to_dict()
        return self._error_response(
            message=body.pop("description"),
            status_code=400,
            error_type=body.pop("code"),
            **body
        )


# ============================================================================
# ENDPOINT TRIGGERS
# ============================================================================

class FeatureItemsTrigger(BaseParamsTrigger):
    """
    Features query trigger.

    Endpoint: GET /api/features/collections/{collection_id}/items

    Query Parameters:
    - limit, offset: paging (clamped to configuration)
    - bbox: minx,miny,maxx,maxy
    - properties: output columns
    - orderby: column[:a|:d]
    - precision: coordinate decimals
    - transform: geometry functions
    - <column>=<value>: equality filters
    """

    def __init__(self,
                 column_catalog: ColumnCatalog,
                 query_handler: QueryHandler,
                 service: Optional[FeatureParamsService] = None):
        super().__init__(service)
        self.column_catalog = column_catalog
        self.query_handler = query_handler

    def handle(self, req: func.HttpRequest) -> func.HttpResponse:
        """
        Handle feature query request.

        Args:
            req: Azure Functions HTTP request

        Returns:
            Response from the query handler, or a JSON error response
        """
        collection_id = req.route_params.get('collection_id')
        if not collection_id:
            return self._error_response(
                message="Collection ID is required",
                status_code=400
            )

        try:
            request_params = self.service.parse(request_query_args(req))
        except InvalidParameterValue as e:
            return self._invalid_parameter_response(e)

        try:
            col_names = self.column_catalog(collection_id)
        except ValueError as e:
            logger.warning(f"Collection not found: {e}")
            return self._error_response(
                message=str(e),
                status_code=404,
                error_type="NotFound"
            )
        except Exception as e:
            logger.error(f"Error reading columns of '{collection_id}': {e}", exc_info=True)
            return self._error_response(
                message=f"Internal server error: {str(e)}",
                status_code=500,
                error_type="InternalServerError"
            )

        query = self.service.build_query(request_params, col_names)
        logger.info(
            f"Feature query parameters: limit={query.limit}, offset={query.offset}, "
            f"columns={len(query.columns)}, filters={len(query.filters)}",
            extra={'custom_dimensions': {'collection_id': collection_id}}
        )

        try:
            return self.query_handler(collection_id, query)
        except Exception as e:
            logger.error(f"Error querying features: {e}", exc_info=True)
            return self._error_response(
                message=f"Internal server error: {str(e)}",
                status_code=500,
                error_type="InternalServerError"
            )
