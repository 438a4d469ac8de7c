from pydantic import BaseModel, Field

from app.insights.models import FieldStat


class DatasetOverview(BaseModel):
    collections: dict[str, int] = Field(default_factory=dict)


class CollectionSummary(BaseModel):
    collection: str
    records: int
    fields: list[str]
    stats: dict[str, FieldStat]
    context: str


class CollectionTable(BaseModel):
    collection: str
    total: int
    shown: int
    table: str
