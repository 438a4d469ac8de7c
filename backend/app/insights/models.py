from typing import Literal, Union

from pydantic import BaseModel, Field


class TopValue(BaseModel):
    value: str
    count: int


class NumericFieldStat(BaseModel):
    kind: Literal["numeric"] = "numeric"
    count: int
    avg: float
    min: float | int
    max: float | int


class CategoricalFieldStat(BaseModel):
    kind: Literal["categorical"] = "categorical"
    count: int
    unique_count: int
    top_values: list[TopValue] | None = None


FieldStat = Union[NumericFieldStat, CategoricalFieldStat]


class AggregateRequest(BaseModel):
    collection: str
    group_by: str
    field: str | None = None
    operation: str = "count"


class AggregateResponse(BaseModel):
    collection: str
    operation: str
    results: dict[str, float | int | None] = Field(default_factory=dict)
    table: str
