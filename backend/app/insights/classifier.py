from __future__ import annotations

from typing import Iterable

# Substring matching accepts false positives such as "list" inside "listen".
DEFAULT_DATA_KEYWORDS: tuple[str, ...] = (
    "analyze",
    "analyse",
    "analysis",
    "count",
    "how many",
    "total",
    "number of",
    "students",
    "records",
    "statistics",
    "stats",
    "data",
    "average",
    "mean",
    "breakdown",
    "compare",
    "comparison",
    "trend",
    "distribution",
    "percentage",
    "ratio",
    "summary",
    "summarize",
    "faculty",
    "staff",
    "gender",
    "sex",
    "male",
    "female",
    "demographic",
    "enrolled",
    "enrollment",
    "table",
    "chart",
    "list",
    "show me",
)


def is_data_query(message: str, keywords: Iterable[str] = DEFAULT_DATA_KEYWORDS) -> bool:
    lowered = message.lower()
    return any(keyword.lower() in lowered for keyword in keywords)
