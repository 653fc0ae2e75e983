"""
Declarative store query produced by the query builder
"""
from pydantic import BaseModel, Field
from typing import Any, List
from enum import Enum


class PredicateOp(str, Enum):
    """Filter operations understood by the company store"""
    CONTAINS_ANY = "contains_any"  # case-insensitive substring, OR over columns x values
    GTE = "gte"
    LTE = "lte"
    LT = "lt"
    NOT_NULL = "not_null"
    IN = "in"


class Predicate(BaseModel):
    """One filter; predicates of a query are ANDed"""

    op: PredicateOp
    columns: List[str]
    values: List[Any] = Field(default_factory=list)


class RemoteQuery(BaseModel):
    """Read-only filtered query against one table"""

    table: str
    predicates: List[Predicate] = Field(default_factory=list)
    limit: int = Field(..., ge=1)
