from app.insights.aggregation import (
    AggregationOp,
    format_aggregation_table,
    generate_markdown_table,
    group_and_aggregate,
)
from app.insights.classifier import DEFAULT_DATA_KEYWORDS, is_data_query
from app.insights.context import build_data_context, extract_relevant_data, infer_fields
from app.insights.models import (
    AggregateRequest,
    AggregateResponse,
    CategoricalFieldStat,
    FieldStat,
    NumericFieldStat,
    TopValue,
)
from app.insights.prompt import build_messages, compose_prompt
from app.insights.stats import render_field_stats, summarize_fields

__all__ = [
    "AggregateRequest",
    "AggregateResponse",
    "AggregationOp",
    "CategoricalFieldStat",
    "DEFAULT_DATA_KEYWORDS",
    "FieldStat",
    "NumericFieldStat",
    "TopValue",
    "build_data_context",
    "build_messages",
    "compose_prompt",
    "extract_relevant_data",
    "format_aggregation_table",
    "generate_markdown_table",
    "group_and_aggregate",
    "infer_fields",
    "is_data_query",
    "render_field_stats",
    "summarize_fields",
]
