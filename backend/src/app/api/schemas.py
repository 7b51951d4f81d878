"""Pydantic schemas for product handler response bodies."""

from __future__ import annotations

from typing import Any
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class OperationResultSchema(BaseModel):
    """Body returned when an operation succeeds."""

    message: str
    body: Any = None

    @classmethod
    def for_method(cls, method: str, result: Any) -> "OperationResultSchema":
        return cls(
            message=f'Successfully finished operation "{method}"',
            body=result,
        )


class OperationFailureSchema(BaseModel):
    """Body returned when an operation raises."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Failed to perform operation!"
    error_msg: str = Field(alias="errorMsg")
    error_stack: Optional[str] = Field(default=None, alias="errorStack")
