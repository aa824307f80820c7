from typing import Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# QUERY DESCRIPTIONS
# =============================================================================
# Clause bodies are raw SQL text. They are never quoted or escaped here;
# the caller is trusted to pass well-formed fragments.


class QuerySpec(BaseModel):
    """
    Structured description of a SELECT statement.

    `source` is the FROM body and may carry JOIN clauses. An absent column
    list selects every column (`*`). `offset` only takes effect together
    with `limit`.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(alias="from")
    columns: Optional[Tuple[str, ...]] = None
    where: Optional[str] = None
    group_by: Optional[str] = None
    having: Optional[str] = None
    order_by: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)
    parameters: Tuple[Any, ...] = ()

    @field_validator("source")
    @classmethod
    def _source_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source must not be blank")
        return value

    @field_validator("columns")
    @classmethod
    def _columns_not_empty(cls, value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        return _check_columns(value)

    @property
    def effective_offset(self) -> Optional[int]:
        """The offset that will actually be emitted (None without a limit)."""
        return self.offset if self.limit is not None else None


class CountSpec(BaseModel):
    """
    Description of a `SELECT count(...)` statement.

    Only the clauses that keep the result to a single row are available.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(alias="from")
    columns: Optional[Tuple[str, ...]] = None
    where: Optional[str] = None
    parameters: Tuple[Any, ...] = ()

    @field_validator("source")
    @classmethod
    def _source_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source must not be blank")
        return value

    @field_validator("columns")
    @classmethod
    def _columns_not_empty(cls, value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        return _check_columns(value)

    @property
    def count_expression(self) -> str:
        return "count(" + ",".join(self.columns or ("*",)) + ")"


class BuiltStatement(BaseModel):
    """SQL text ready for the engine plus its positional parameters."""
    model_config = ConfigDict(frozen=True)

    sql: str
    parameters: Tuple[Any, ...] = ()


def _check_columns(value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
    # An explicit empty list would render "SELECT  FROM ..."; reject it instead
    # of guessing that the caller meant "*".
    if value is None:
        return value
    if len(value) == 0:
        raise ValueError("columns must be omitted or contain at least one expression")
    for column in value:
        if not column.strip():
            raise ValueError("column expressions must not be blank")
    return value
