from __future__ import annotations

from typing import Any, Mapping

from app.insights.stats import ID_FIELD, render_field_stats, summarize_fields

Dataset = Mapping[str, list[dict[str, Any]]]

CONTEXT_HEADER = "=== DATABASE OVERVIEW ==="


def infer_fields(records: list[dict[str, Any]], sample_size: int = 1) -> list[str]:
    """Return the field names seen in the first ``sample_size`` records.

    With the default of one record an atypical first document hides fields
    that only later records carry.
    """
    fields: list[str] = []
    for record in records[: max(sample_size, 1)]:
        for key in record:
            if key != ID_FIELD and key not in fields:
                fields.append(key)
    return fields


def build_collection_context(name: str, records: list[dict[str, Any]], sample_size: int = 1) -> str:
    block = f"📊 Collection: {name}\n   Records: {len(records)}\n"
    if not records:
        return block
    fields = infer_fields(records, sample_size)
    block += f"   Fields: {', '.join(fields)}\n"
    block += render_field_stats(summarize_fields(records, fields))
    return block + "\n"


def build_data_context(dataset: Dataset, sample_size: int = 1) -> str:
    parts = [f"{CONTEXT_HEADER}\n\n"]
    for name, records in dataset.items():
        parts.append(build_collection_context(name, records, sample_size))
    return "".join(parts)


def extract_relevant_data(message: str, dataset: Dataset) -> dict[str, list[dict[str, Any]]]:
    lowered = message.lower()
    relevant = {name: records for name, records in dataset.items() if name.lower() in lowered}
    return relevant or dict(dataset)


def has_records(dataset: Dataset) -> bool:
    return any(records for records in dataset.values())
