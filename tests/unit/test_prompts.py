"""Unit Tests for the prompt_toolkit prompter

Runs real prompt sessions against a pipe input and a dummy output.
"""

import asyncio
from collections.abc import Iterator

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.input import PipeInput, create_pipe_input
from prompt_toolkit.output import DummyOutput
from prompt_toolkit.validation import ValidationError

from schema_console.core import CancellationScope
from schema_console.core.session import filter_suggestions
from schema_console.errors import IterationCancelled
from schema_console.prompts import (
    PromptToolkitPrompter,
    SuggestionCompleter,
    SuggestionValidator,
)

TABLES = ["users", "orders", "user_roles"]


def suggest_tables(partial_input: str):
    return filter_suggestions(TABLES, partial_input)


@pytest.fixture
def pipe_input() -> Iterator[PipeInput]:
    with create_pipe_input() as pipe:
        yield pipe


@pytest.fixture
def prompter(pipe_input: PipeInput) -> PromptToolkitPrompter:
    return PromptToolkitPrompter(input=pipe_input, output=DummyOutput())


class TestSuggestionCompleter:
    """Test the completion menu feed."""

    def test_completions_follow_typed_text(self):
        completer = SuggestionCompleter(suggest_tables)

        completions = list(
            completer.get_completions(Document("user"), CompleteEvent())
        )

        assert [c.text for c in completions] == ["users", "user_roles"]
        assert all(c.start_position == -4 for c in completions)

    def test_everything_offered_for_empty_input(self):
        completer = SuggestionCompleter(suggest_tables)

        completions = list(completer.get_completions(Document(""), CompleteEvent()))

        assert [c.text for c in completions] == TABLES


class TestSuggestionValidator:
    """Test that only offered values are accepted."""

    def test_accepts_offered_value(self):
        SuggestionValidator(suggest_tables).validate(Document("orders"))

    def test_rejects_partial_value(self):
        with pytest.raises(ValidationError):
            SuggestionValidator(suggest_tables).validate(Document("order"))

    def test_rejects_empty_input(self):
        with pytest.raises(ValidationError):
            SuggestionValidator(suggest_tables).validate(Document(""))


class TestPromptToolkitPrompter:
    """Test prompts end to end."""

    async def test_text_returns_input_verbatim(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        pipe_input.send_text("= 'a@b.com'\r")

        text = await asyncio.wait_for(
            prompter.text("Query?", CancellationScope()), timeout=5
        )

        assert text == "= 'a@b.com'"

    async def test_search_returns_selected_value(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        pipe_input.send_text("orders\r")

        value = await asyncio.wait_for(
            prompter.search("Table?", suggest_tables, CancellationScope()), timeout=5
        )

        assert value == "orders"

    async def test_ctrl_c_cancels_scope(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        scope = CancellationScope()
        pipe_input.send_text("use\x03")

        with pytest.raises(IterationCancelled):
            await asyncio.wait_for(
                prompter.search("Table?", suggest_tables, scope), timeout=5
            )

        assert scope.cancelled
        assert scope.reason == "interrupted"

    async def test_escape_cancels_search(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        scope = CancellationScope()
        pipe_input.send_text("use\x1b")

        with pytest.raises(IterationCancelled) as exc_info:
            await asyncio.wait_for(
                prompter.search("Table?", suggest_tables, scope), timeout=5
            )

        assert exc_info.value.reason == "escape pressed"
        assert scope.reason == "escape pressed"

    async def test_escape_cancels_text(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        scope = CancellationScope()
        pipe_input.send_text("= 1\x1b")

        with pytest.raises(IterationCancelled):
            await asyncio.wait_for(prompter.text("Query?", scope), timeout=5)

        assert scope.cancelled
        assert scope.reason == "escape pressed"

    async def test_external_cancel_resolves_prompt(
        self, prompter: PromptToolkitPrompter
    ):
        """A prompt waiting for input ends when the scope is cancelled."""
        scope = CancellationScope()

        pending = asyncio.create_task(prompter.text("Query?", scope))
        await asyncio.sleep(0.05)
        scope.cancel("interrupted")

        with pytest.raises(IterationCancelled):
            await asyncio.wait_for(pending, timeout=5)

    async def test_cancelled_scope_skips_prompt(self, prompter: PromptToolkitPrompter):
        scope = CancellationScope()
        scope.cancel()

        with pytest.raises(IterationCancelled):
            await prompter.text("Query?", scope)

    async def test_ctrl_d_ends_input(
        self, prompter: PromptToolkitPrompter, pipe_input: PipeInput
    ):
        pipe_input.send_text("\x04")

        with pytest.raises(EOFError):
            await asyncio.wait_for(
                prompter.text("Query?", CancellationScope()), timeout=5
            )
