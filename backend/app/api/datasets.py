import math

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_document_store, get_settings
from app.core.config import Settings
from app.core.errors import InvalidRequest
from app.insights.aggregation import (
    TABLE_MAX_ROWS,
    AggregationOp,
    format_aggregation_table,
    generate_markdown_table,
    group_and_aggregate,
)
from app.insights.context import build_collection_context, infer_fields
from app.insights.models import AggregateRequest, AggregateResponse
from app.insights.stats import summarize_fields
from app.schemas.datasets import CollectionSummary, CollectionTable, DatasetOverview
from app.services.documents import DocumentStore

router = APIRouter(tags=["datasets"])


@router.get("/datasets", response_model=DatasetOverview)
def list_collections(store: DocumentStore = Depends(get_document_store)) -> DatasetOverview:
    dataset = store.fetch_dataset()
    return DatasetOverview(collections={name: len(records) for name, records in dataset.items()})


@router.get("/datasets/{collection}/summary", response_model=CollectionSummary)
def summarize_collection(
    collection: str,
    store: DocumentStore = Depends(get_document_store),
    config: Settings = Depends(get_settings),
) -> CollectionSummary:
    records = store.fetch_collection(collection)
    fields = infer_fields(records, config.schema_sample_size)
    return CollectionSummary(
        collection=collection,
        records=len(records),
        fields=fields,
        stats=summarize_fields(records, fields),
        context=build_collection_context(collection, records, config.schema_sample_size),
    )


@router.get("/datasets/{collection}/table", response_model=CollectionTable)
def collection_table(
    collection: str,
    fields: list[str] | None = Query(default=None),
    store: DocumentStore = Depends(get_document_store),
    config: Settings = Depends(get_settings),
) -> CollectionTable:
    records = store.fetch_collection(collection)
    columns = fields or infer_fields(records, config.schema_sample_size)
    return CollectionTable(
        collection=collection,
        total=len(records),
        shown=min(len(records), TABLE_MAX_ROWS),
        table=generate_markdown_table(records, columns),
    )


@router.post("/aggregate", response_model=AggregateResponse)
def aggregate_collection(
    payload: AggregateRequest,
    store: DocumentStore = Depends(get_document_store),
) -> AggregateResponse:
    try:
        operation = AggregationOp(payload.operation)
    except ValueError as exc:
        allowed = ", ".join(op.value for op in AggregationOp)
        raise InvalidRequest(f"Unsupported operation: {payload.operation}", details=f"expected one of {allowed}") from exc
    if operation is not AggregationOp.COUNT and not payload.field:
        raise InvalidRequest(f"field is required for operation {operation.value}")

    records = store.fetch_collection(payload.collection)
    results = group_and_aggregate(records, payload.group_by, payload.field, operation)
    # Groups with no values under min/max come back as +/-inf, which JSON cannot carry.
    finite = {
        key: value if math.isfinite(value) else None
        for key, value in results.items()
    }
    return AggregateResponse(
        collection=payload.collection,
        operation=operation.value,
        results=finite,
        table=format_aggregation_table(finite, payload.group_by, payload.field or "count"),
    )
