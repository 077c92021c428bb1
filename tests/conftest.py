"""Shared fixtures: every test starts from the built-in registries and default message source."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from jsonv8n.compiler import clear_compile_cache, properties_repo_reset
from jsonv8n.constraints.presets import presets
from jsonv8n.constraints.registry import registry_reset
from jsonv8n.messages import reset_message_source
from jsonv8n.observability.logging import shutdown_logging
from jsonv8n.tags.extensions import clear_custom_tag_tokens, clear_tag_token_aliases


@pytest.fixture(autouse=True)
def _reset_process_registries() -> Iterator[None]:
    yield
    presets.reset()
    registry_reset()
    clear_tag_token_aliases()
    clear_custom_tag_tokens()
    reset_message_source()
    properties_repo_reset()
    clear_compile_cache()
    shutdown_logging()
