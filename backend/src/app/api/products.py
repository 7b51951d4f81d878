"""Lambda handler for the product catalog API.

Routes API Gateway proxy events to item operations backed by DynamoDB:

- ``GET /products`` lists every product.
- ``GET /products/{id}`` returns one product.
- ``GET /products/{id}?category=...`` returns the product if its
  category contains the given text.
- ``POST /products`` creates a product with a generated id.
- ``PUT /products/{id}`` overwrites the fields present in the body.
- ``DELETE /products/{id}`` removes a product.

Every success answers 200 and every failure answers 500 with the error
message and traceback in the body.
"""

from __future__ import annotations

import time
import traceback
from typing import Any
from typing import Mapping
from typing import Optional
from uuid import uuid4

from app.api.schemas import OperationFailureSchema
from app.api.schemas import OperationResultSchema
from app.db.repositories import ProductRepository
from app.exceptions import UnsupportedRouteError
from app.services.aws_clients import get_dynamodb_client
from app.settings import get_settings
from app.utils import json_response
from app.utils.logging import clear_request_context
from app.utils.logging import configure_logging
from app.utils.logging import get_logger
from app.utils.logging import log_lambda_event
from app.utils.logging import log_response
from app.utils.logging import resolve_request_id
from app.utils.logging import set_request_context
from app.utils.parsers import get_path_param
from app.utils.parsers import get_query_param
from app.utils.parsers import parse_object_body

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)


class ProductRouter:
    """Dispatch product requests to repository operations."""

    def __init__(self, repository: ProductRepository):
        self._repository = repository

    @property
    def repository(self) -> ProductRepository:
        return self._repository

    def route(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Run the operation selected by the event and build the response.

        This is the only place errors are caught; any exception becomes
        a 500 response.
        """
        method = event.get("httpMethod")
        try:
            result = self.dispatch(event)
            logger.debug("Operation result", extra={"result": result})
            return json_response(
                200,
                OperationResultSchema.for_method(str(method), result),
                event=event,
            )
        except Exception as exc:
            logger.exception(
                f"Failed to perform operation {method}",
                extra={"detail": getattr(exc, "detail", None)},
            )
            return _failure_response(exc, event)

    def dispatch(self, event: Mapping[str, Any]) -> Any:
        """Select and run one operation for the event.

        Raises:
            UnsupportedRouteError: If the method is not GET, POST, PUT
                or DELETE.
        """
        method = event.get("httpMethod")
        if method == "GET":
            if event.get("queryStringParameters") is not None:
                return self.fetch_by_category(
                    get_path_param(event, "id"),
                    get_query_param(event, "category"),
                )
            if event.get("pathParameters") is not None:
                return self.fetch_one(get_path_param(event, "id"))
            return self.fetch_all()
        if method == "POST":
            return self.create_item(event)
        if method == "PUT":
            return self.update_item(event)
        if method == "DELETE":
            return self.delete_item(get_path_param(event, "id"))
        raise UnsupportedRouteError(method)

    def fetch_one(self, product_id: str) -> dict[str, Any]:
        """Return the product with this id, or an empty dict."""
        item = self._repository.get_by_id(product_id)
        logger.info(f"Fetched product {product_id}", extra={"found": bool(item)})
        return item

    def fetch_all(self) -> list[dict[str, Any]]:
        items = self._repository.get_all()
        logger.info(f"Fetched {len(items)} products", extra={"count": len(items)})
        return items

    def fetch_by_category(
        self,
        product_id: str,
        category: str,
    ) -> list[dict[str, Any]]:
        """Return the product with this id when its category matches.

        The query is keyed on the id and filtered on the category, so
        products with another id are never returned.
        """
        items = self._repository.find_by_category(product_id, category)
        logger.info(
            f"Fetched {len(items)} products for category {category!r}",
            extra={"count": len(items)},
        )
        return items

    def create_item(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Store the request body as a new product with a generated id.

        Any ``id`` in the body is replaced. Returns the raw PutItem
        response.
        """
        item = parse_object_body(event)
        item["id"] = str(uuid4())
        result = self._repository.put(item)
        logger.info(f"Created product {item['id']}")
        return result

    def delete_item(self, product_id: str) -> dict[str, Any]:
        result = self._repository.delete(product_id)
        logger.info(f"Deleted product {product_id}")
        return result

    def update_item(self, event: Mapping[str, Any]) -> dict[str, Any]:
        """Overwrite the top-level fields named in the request body.

        Returns the raw UpdateItem response.

        Raises:
            MalformedBodyError: If the body is invalid or has no fields.
        """
        product_id = get_path_param(event, "id")
        fields = parse_object_body(event)
        logger.info(
            f"Updating product {product_id}",
            extra={"fields": sorted(fields)},
        )
        return self._repository.update_fields(product_id, fields)


def _failure_response(
    exc: BaseException,
    event: Mapping[str, Any],
) -> dict[str, Any]:
    failure = OperationFailureSchema(
        error_msg=str(exc),
        error_stack="".join(traceback.format_exception(exc)),
    )
    return json_response(500, failure, event=event)


_ROUTER: Optional[ProductRouter] = None


def get_router() -> ProductRouter:
    """Return the process-wide router, building it on first use."""
    global _ROUTER
    if _ROUTER is None:
        settings = get_settings()
        repository = ProductRepository(
            get_dynamodb_client(region_name=settings.region_name),
            settings.table_name,
        )
        _ROUTER = ProductRouter(repository)
    return _ROUTER


def clear_router_cache() -> None:
    """Drop the cached router (useful in tests)."""
    global _ROUTER
    _ROUTER = None


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle API Gateway request for the product catalog."""

    # Set request context for logging
    set_request_context(req_id=resolve_request_id(event, context))
    start_time = time.perf_counter()

    try:
        log_lambda_event(logger, event)
        try:
            router = get_router()
        except Exception as exc:
            logger.exception("Failed to initialize product router")
            response = _failure_response(exc, event)
        else:
            response = router.route(event)
        log_response(
            logger,
            response["statusCode"],
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return response
    finally:
        clear_request_context()
