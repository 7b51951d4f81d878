"""Builders for DynamoDB update expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Mapping

from app.db.marshalling import marshall_value
from app.exceptions import MalformedBodyError


@dataclass(frozen=True)
class UpdateExpression:
    """A ``SET`` clause with its name and value substitution tables."""

    expression: str
    names: dict[str, str]
    values: dict[str, dict[str, Any]]

    def to_params(self) -> dict[str, Any]:
        """Return keyword arguments for ``update_item``."""
        return {
            "UpdateExpression": self.expression,
            "ExpressionAttributeNames": self.names,
            "ExpressionAttributeValues": self.values,
        }


def build_set_expression(fields: Mapping[str, Any]) -> UpdateExpression:
    """Build a ``SET`` expression overwriting each field in ``fields``.

    Field names and values are never placed in the expression directly.
    Each field gets a ``#keyN`` name token and a ``:valueN`` value token,
    so names that collide with DynamoDB reserved words (``name``,
    ``status``, ``size``...) remain valid.

    Args:
        fields: Mapping of attribute name to new value.

    Returns:
        The expression and its substitution tables.

    Raises:
        MalformedBodyError: If ``fields`` is empty.
    """
    if not fields:
        raise MalformedBodyError("Update body must contain at least one field")

    assignments: list[str] = []
    names: dict[str, str] = {}
    values: dict[str, dict[str, Any]] = {}
    for index, (field_name, value) in enumerate(fields.items()):
        name_token = f"#key{index}"
        value_token = f":value{index}"
        assignments.append(f"{name_token} = {value_token}")
        names[name_token] = field_name
        values[value_token] = marshall_value(value)

    return UpdateExpression(
        expression="SET " + ", ".join(assignments),
        names=names,
        values=values,
    )
