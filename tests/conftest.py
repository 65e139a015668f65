from typing import Any, Callable, Dict

import pytest

from simple_llm_chat.chat_core.config import ChatConfig


@pytest.fixture
def make_config() -> Callable[..., ChatConfig]:
    def _make(**overrides: Any) -> ChatConfig:
        values: Dict[str, Any] = {
            "llm_server": "http://llm.test",
            "api_key": "test-key",
            "model": "test-model",
            "system_prompt": "You are a test assistant.",
        }
        values.update(overrides)
        return ChatConfig(**values)

    return _make
