from __future__ import annotations

from app.insights.context import Dataset, build_data_context, has_records

USER_QUESTION_HEADER = "=== USER QUESTION ==="
FORMATTING_INSTRUCTION = (
    "Please analyze the data above and answer the user's question. "
    "Use tables, lists, and proper markdown formatting in your response."
)


def compose_prompt(message: str, dataset: Dataset, data_query: bool, sample_size: int = 1) -> str:
    """Build the user turn sent to the relay.

    Casual messages and queries against an empty dataset pass through
    untouched; data queries get the dataset digest prepended and a
    formatting instruction appended.
    """
    if not data_query or not has_records(dataset):
        return message
    context = build_data_context(dataset, sample_size)
    return f"{context}\n{USER_QUESTION_HEADER}\n{message}\n\n{FORMATTING_INSTRUCTION}"


def build_messages(system_prompt: str, prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": prompt},
    ]
