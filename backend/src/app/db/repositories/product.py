"""Repository for product catalog items stored in DynamoDB.

Items are keyed by a string ``id`` attribute. Every method issues a
single DynamoDB call and returns plain Python values; botocore faults
are re-raised as ``StoreError``.
"""

from __future__ import annotations

from typing import Any
from typing import Mapping

from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError

from app.db.expressions import build_set_expression
from app.db.marshalling import marshall
from app.db.marshalling import marshall_value
from app.db.marshalling import unmarshall
from app.exceptions import StoreError
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductRepository:
    """Item-level CRUD and query access to the product table."""

    def __init__(self, client: Any, table_name: str):
        """Initialize the repository.

        Args:
            client: A boto3 low-level DynamoDB client.
            table_name: Name of the product table.
        """
        self._client = client
        self._table_name = table_name

    @property
    def table_name(self) -> str:
        """Get the target table name."""
        return self._table_name

    def get_by_id(self, product_id: str) -> dict[str, Any]:
        """Get a single item by id.

        Returns:
            The item, or an empty dict when no item has this id.
        """
        response = self._call("get_item", Key=self._key(product_id))
        item = response.get("Item")
        return unmarshall(item) if item else {}

    def get_all(self) -> list[dict[str, Any]]:
        """Scan the table and return every item on the first result page.

        DynamoDB truncates a scan at 1 MB; ``LastEvaluatedKey`` is not
        followed.
        """
        response = self._call("scan")
        if response.get("LastEvaluatedKey"):
            logger.warning("Scan result truncated, returning first page only")
        return [unmarshall(item) for item in response.get("Items", [])]

    def find_by_category(
        self,
        product_id: str,
        category: str,
    ) -> list[dict[str, Any]]:
        """Query items with this id whose category contains ``category``."""
        response = self._call(
            "query",
            KeyConditionExpression="id = :productId",
            FilterExpression="contains (category, :category)",
            ExpressionAttributeValues={
                ":productId": marshall_value(product_id),
                ":category": marshall_value(category),
            },
        )
        return [unmarshall(item) for item in response.get("Items", [])]

    def put(self, item: Mapping[str, Any]) -> dict[str, Any]:
        """Write an item unconditionally, replacing any existing one."""
        return self._call("put_item", Item=marshall(item))

    def delete(self, product_id: str) -> dict[str, Any]:
        """Delete an item by id. Deleting a missing id succeeds."""
        return self._call("delete_item", Key=self._key(product_id))

    def update_fields(
        self,
        product_id: str,
        fields: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Overwrite the given top-level fields of an item.

        Raises:
            MalformedBodyError: If ``fields`` is empty.
        """
        update = build_set_expression(fields)
        logger.debug(
            "Update expression built",
            extra={"update_expression": update.expression, "names": update.names},
        )
        return self._call(
            "update_item",
            Key=self._key(product_id),
            **update.to_params(),
        )

    def _key(self, product_id: str) -> dict[str, dict[str, Any]]:
        return marshall({"id": product_id})

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        """Invoke a client operation against the product table."""
        method = getattr(self._client, operation)
        try:
            response = method(TableName=self._table_name, **params)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            logger.error(
                f"DynamoDB {operation} failed: {error.get('Code')}",
                extra={"operation": operation},
            )
            raise StoreError(
                operation,
                error.get("Message") or str(exc),
                code=error.get("Code"),
            ) from exc
        except BotoCoreError as exc:
            logger.error(
                f"DynamoDB {operation} failed: {exc}",
                extra={"operation": operation},
            )
            raise StoreError(operation, str(exc)) from exc
        logger.debug(f"DynamoDB {operation} succeeded")
        return response
