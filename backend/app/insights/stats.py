from __future__ import annotations

import json
import math
from typing import Any, Iterable

import pandas as pd

from app.insights.models import CategoricalFieldStat, FieldStat, NumericFieldStat, TopValue

ID_FIELD = "id"
# Larger categorical fields are reported by unique count only, keeping the prompt bounded.
CATEGORICAL_BREAKDOWN_MAX_UNIQUE = 10
TOP_VALUES_LIMIT = 3


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _hashable(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return value


def _to_python(value: Any) -> Any:
    return value.item() if hasattr(value, "item") else value


def _observed_values(records: Iterable[dict[str, Any]], field: str) -> list[Any]:
    return [
        record[field]
        for record in records
        if field in record and not is_missing(record[field])
    ]


def _numeric_stat(values: list[Any]) -> NumericFieldStat:
    numeric = pd.Series([value for value in values if is_numeric(value)])
    return NumericFieldStat(
        count=len(values),
        avg=float(numeric.mean()),
        min=_to_python(numeric.min()),
        max=_to_python(numeric.max()),
    )


def _categorical_stat(values: list[Any]) -> CategoricalFieldStat:
    series = pd.Series([_hashable(value) for value in values], dtype=object)
    uniques = pd.unique(series)
    if len(uniques) > CATEGORICAL_BREAKDOWN_MAX_UNIQUE:
        return CategoricalFieldStat(count=len(values), unique_count=len(uniques))

    # Reindex by first appearance so the stable sort breaks ties in encounter order.
    counts = series.value_counts(sort=False).reindex(uniques)
    counts = counts.sort_values(ascending=False, kind="stable").head(TOP_VALUES_LIMIT)
    top_values = [TopValue(value=str(value), count=int(count)) for value, count in counts.items()]
    return CategoricalFieldStat(
        count=len(values),
        unique_count=len(uniques),
        top_values=top_values,
    )


def summarize_field(records: list[dict[str, Any]], field: str) -> FieldStat | None:
    values = _observed_values(records, field)
    if not values:
        return None
    numeric_count = sum(1 for value in values if is_numeric(value))
    if numeric_count > len(values) * 0.5:
        return _numeric_stat(values)
    return _categorical_stat(values)


def summarize_fields(records: list[dict[str, Any]], fields: Iterable[str]) -> dict[str, FieldStat]:
    stats: dict[str, FieldStat] = {}
    for field in fields:
        if field == ID_FIELD:
            continue
        stat = summarize_field(records, field)
        if stat is not None:
            stats[field] = stat
    return stats


def _format_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_field_stat(field: str, stat: FieldStat) -> str:
    if isinstance(stat, NumericFieldStat):
        return (
            f"   • {field}: avg={stat.avg:.2f}, "
            f"min={_format_number(stat.min)}, max={_format_number(stat.max)}\n"
        )
    if stat.top_values is None:
        return (
            f"   • {field}: {stat.unique_count} unique values "
            f"({stat.count} records, breakdown omitted)\n"
        )
    line = f"   • {field}: {stat.unique_count} unique values\n"
    if stat.top_values:
        top = ", ".join(f"{item.value}({item.count})" for item in stat.top_values)
        line += f"     Top: {top}\n"
    return line


def render_field_stats(stats: dict[str, FieldStat]) -> str:
    return "".join(render_field_stat(field, stat) for field, stat in stats.items())
