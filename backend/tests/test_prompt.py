from app.insights.classifier import is_data_query
from app.insights.prompt import (
    FORMATTING_INSTRUCTION,
    USER_QUESTION_HEADER,
    build_messages,
    compose_prompt,
)

DATASET = {
    "students": [
        {"id": "s1", "age": 19, "sex": "F"},
        {"id": "s2", "age": 21, "sex": "M"},
    ]
}


def test_data_questions_are_classified_as_data_queries() -> None:
    assert is_data_query("how many students are enrolled") is True
    assert is_data_query("Show me the AVERAGE age") is True


def test_casual_messages_are_not_data_queries() -> None:
    assert is_data_query("hello, how are you") is False
    assert is_data_query("") is False


def test_classifier_uses_given_keywords() -> None:
    assert is_data_query("hello there", keywords=("hello",)) is True
    assert is_data_query("how many students", keywords=("payroll",)) is False


def test_compose_prompt_for_data_query_includes_context_and_question() -> None:
    message = "how many students are enrolled"

    prompt = compose_prompt(message, DATASET, data_query=True)

    assert prompt.startswith("=== DATABASE OVERVIEW ===")
    assert "📊 Collection: students" in prompt
    context, question = prompt.split(f"\n{USER_QUESTION_HEADER}\n")
    assert "Records: 2" in context
    assert question == f"{message}\n\n{FORMATTING_INSTRUCTION}"


def test_compose_prompt_passes_casual_message_through() -> None:
    message = "hello, how are you"

    assert compose_prompt(message, DATASET, data_query=False) == message


def test_compose_prompt_skips_context_when_dataset_is_empty() -> None:
    message = "how many students are enrolled"

    assert compose_prompt(message, {"students": []}, data_query=True) == message
    assert compose_prompt(message, {}, data_query=True) == message


def test_build_messages_is_system_then_user() -> None:
    messages = build_messages("You are GIA.", "hi")

    assert messages == [
        {"role": "system", "content": "You are GIA."},
        {"role": "user", "content": "hi"},
    ]
