from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Iterable

import pandas as pd

from app.insights.stats import is_numeric

UNKNOWN_GROUP = "Unknown"
# Sentinels substituted for missing aggregate values; min/max groups with no
# values therefore come back non-finite and must be guarded before display.
MISSING_SUM_VALUE = 0
MISSING_MIN_VALUE = math.inf
MISSING_MAX_VALUE = -math.inf
TABLE_MAX_ROWS = 10


class AggregationOp(str, Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


_MISSING_VALUES = {
    AggregationOp.COUNT: MISSING_SUM_VALUE,
    AggregationOp.SUM: MISSING_SUM_VALUE,
    AggregationOp.AVG: MISSING_SUM_VALUE,
    AggregationOp.MIN: MISSING_MIN_VALUE,
    AggregationOp.MAX: MISSING_MAX_VALUE,
}


def _group_key(record: dict[str, Any], group_by: str) -> str:
    value = record.get(group_by)
    if not value:
        return UNKNOWN_GROUP
    return str(value)


def _aggregate_value(record: dict[str, Any], field: str | None, missing: float | int) -> float | int:
    value = record.get(field) if field else None
    if not value or not is_numeric(value):
        return missing
    return value


def group_and_aggregate(
    records: Iterable[dict[str, Any]],
    group_by: str,
    aggregate_field: str | None = None,
    operation: AggregationOp | str = AggregationOp.COUNT,
) -> dict[str, float | int]:
    """Group ``records`` by ``group_by`` and reduce each group with ``operation``.

    Records without a group value land in the ``"Unknown"`` group. Missing
    aggregate values count as 0 for sum/avg and as +inf/-inf for min/max.
    """
    op = AggregationOp(operation)
    missing = _MISSING_VALUES[op]
    rows = [
        {"group": _group_key(record, group_by), "value": _aggregate_value(record, aggregate_field, missing)}
        for record in records
    ]
    if not rows:
        return {}

    frame = pd.DataFrame(rows)
    grouped = frame.groupby("group", sort=False)["value"]
    if op is AggregationOp.COUNT:
        result = grouped.size()
    elif op is AggregationOp.SUM:
        result = grouped.sum()
    elif op is AggregationOp.AVG:
        result = grouped.mean()
    elif op is AggregationOp.MIN:
        result = grouped.min()
    else:
        result = grouped.max()
    return {str(key): _to_python(value) for key, value in result.items()}


def _to_python(value: Any) -> Any:
    return value.item() if hasattr(value, "item") else value


def format_aggregation_table(
    results: dict[str, Any],
    key_label: str = "Category",
    value_label: str = "Value",
) -> str:
    table = f"| {key_label} | {value_label} |\n|---|---|\n"
    for key, value in results.items():
        formatted = f"{value:.2f}" if is_numeric(value) else _cell(value)
        table += f"| {key} | {formatted} |\n"
    return table


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def generate_markdown_table(
    records: list[dict[str, Any]],
    fields: list[str],
    max_rows: int = TABLE_MAX_ROWS,
) -> str:
    if not records:
        return ""
    table = "| " + " | ".join(fields) + " |\n"
    table += "| " + " | ".join("---" for _ in fields) + " |\n"
    for record in records[:max_rows]:
        table += "| " + " | ".join(_cell(record.get(field)) for field in fields) + " |\n"
    if len(records) > max_rows:
        table += f"\n*Showing {max_rows} of {len(records)} records*\n"
    return table
