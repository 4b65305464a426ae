"""Tests for display helpers and title derivation."""

import pytest

from chatflow.models.catalog import DEFAULT_MODEL, MODEL_CATALOG, is_known_model
from chatflow.models.rendering import truncate_title, unwrap_assistant_content
from chatflow.models.session import derive_title


class TestUnwrapAssistantContent:
    def test_output_envelope_is_unwrapped(self):
        assert unwrap_assistant_content("assistant", '{"output": "Hi!"}') == "Hi!"

    @pytest.mark.parametrize(
        "content",
        ["plain text", '{"answer": "x"}', '{"output": 3}', "[1, 2]", ""],
    )
    def test_other_content_shown_verbatim(self, content):
        assert unwrap_assistant_content("assistant", content) == content

    def test_user_content_never_unwrapped(self):
        assert unwrap_assistant_content("user", '{"output": "Hi!"}') == '{"output": "Hi!"}'


class TestTitles:
    def test_derive_title_truncates_to_fifty(self):
        assert derive_title("a" * 60) == "a" * 50

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_derive_title_placeholder(self, text):
        assert derive_title(text) == "New Chat"

    def test_truncate_title_for_sidebar(self):
        assert truncate_title("b" * 31) == "b" * 30 + "..."
        assert truncate_title("b" * 30) == "b" * 30


class TestCatalog:
    def test_default_model_is_in_catalog(self):
        assert is_known_model(DEFAULT_MODEL)

    def test_catalog_values_are_unique(self):
        values = [option.value for option in MODEL_CATALOG]
        assert len(values) == len(set(values))
