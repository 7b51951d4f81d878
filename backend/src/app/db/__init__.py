"""DynamoDB access: marshalling, expressions and repositories."""

from app.db.expressions import UpdateExpression
from app.db.expressions import build_set_expression
from app.db.marshalling import marshall
from app.db.marshalling import marshall_value
from app.db.marshalling import unmarshall

__all__ = [
    "UpdateExpression",
    "build_set_expression",
    "marshall",
    "marshall_value",
    "unmarshall",
]
