"""Tests for inbound completion DTOs.

Covers happy paths, camelCase aliases and the inclusive bounds of every
sampling parameter.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ai_gateway.base.dto import CompletionInputDTO, CompletionSettingsDTO
from ai_gateway.base.models import ChatMessage, GenerationSettings


def _body(**extra):
    body = {"modelId": "model-1", "messages": [{"role": "user", "content": "Hello"}]}
    body.update(extra)
    return body


def test_happy_path_with_aliases():
    dto = CompletionInputDTO.model_validate(_body(chatId="t-1", settings={"maxTokens": 64, "topP": 0.5}))
    assert dto.model_id == "model-1"  # nosec B101 - assert is appropriate in unit tests
    assert dto.thread_id == "t-1"  # nosec B101 - assert is appropriate in unit tests
    assert dto.to_messages() == [ChatMessage(role="user", content="Hello")]  # nosec B101 - assert is appropriate in unit tests
    assert dto.settings is not None  # nosec B101 - assert is appropriate in unit tests
    assert dto.settings.to_settings() == GenerationSettings(max_tokens=64, top_p=0.5)  # nosec B101 - assert is appropriate in unit tests


def test_field_names_are_accepted_too():
    dto = CompletionInputDTO(model_id="m", messages=[{"role": "system", "content": "s"}], thread_id=None)
    assert dto.model_id == "m"  # nosec B101 - assert is appropriate in unit tests


def test_rejects_empty_conversation_and_empty_content():
    with pytest.raises(ValidationError):
        CompletionInputDTO.model_validate(_body(messages=[]))
    with pytest.raises(ValidationError):
        CompletionInputDTO.model_validate(_body(messages=[{"role": "user", "content": ""}]))


def test_rejects_unknown_role_and_missing_model():
    with pytest.raises(ValidationError):
        CompletionInputDTO.model_validate(_body(messages=[{"role": "tool", "content": "x"}]))
    with pytest.raises(ValidationError):
        CompletionInputDTO.model_validate({"messages": [{"role": "user", "content": "x"}]})


@pytest.mark.parametrize(
    "settings",
    [
        {"temperature": 0},
        {"temperature": 2},
        {"maxTokens": 1},
        {"maxTokens": 1_000_000},
        {"topP": 0},
        {"topP": 1},
        {"topK": 0},
        {"topK": 100},
        {"frequencyPenalty": -2},
        {"presencePenalty": 2},
    ],
)
def test_settings_bounds_are_inclusive(settings):
    CompletionSettingsDTO.model_validate(settings)


@pytest.mark.parametrize(
    "settings",
    [
        {"temperature": -0.1},
        {"temperature": 2.01},
        {"maxTokens": 0},
        {"maxTokens": 1_000_001},
        {"maxTokens": 10.5},
        {"topP": 1.1},
        {"topK": -1},
        {"topK": 101},
        {"frequencyPenalty": -2.5},
        {"presencePenalty": 2.5},
        {"seed": 1},
    ],
)
def test_settings_out_of_range_are_rejected(settings):
    with pytest.raises(ValidationError):
        CompletionSettingsDTO.model_validate(settings)


def test_unset_settings_are_omitted():
    assert CompletionSettingsDTO.model_validate({}).to_settings().to_dict() == {}  # nosec B101 - assert is appropriate in unit tests
