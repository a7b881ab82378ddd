"""prompt_toolkit implementation of the session's prompts."""

from collections.abc import Iterable
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.output import Output
from prompt_toolkit.validation import ValidationError, Validator

from schema_console.core.cancellation import CancellationScope
from schema_console.core.session import SuggestFn
from schema_console.errors import IterationCancelled


class SuggestionCompleter(Completer):
    """Feeds the live completion menu from a suggestion callback."""

    def __init__(self, suggest: SuggestFn):
        self.suggest = suggest

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        typed = document.text_before_cursor
        for suggestion in self.suggest(typed):
            yield Completion(
                suggestion.value,
                start_position=-len(typed),
                display=suggestion.label,
            )


class SuggestionValidator(Validator):
    """Accepts only input that is exactly one of the offered values."""

    def __init__(self, suggest: SuggestFn):
        self.suggest = suggest

    def validate(self, document: Document) -> None:
        typed = document.text
        if not any(s.value == typed for s in self.suggest(typed)):
            raise ValidationError(
                cursor_position=len(typed),
                message="Pick one of the suggestions (Esc to start over)",
            )


class PromptToolkitPrompter:
    """Search and free-text prompts bound to a cancellation scope.

    Escape and Ctrl-C cancel the scope of the running iteration. Ctrl-D on an
    empty line raises EOFError. The terminal is in raw mode while a prompt is
    shown, so Ctrl-C arrives as a key press; the process SIGINT handler is left
    to the caller.
    """

    def __init__(
        self, input: Optional[Input] = None, output: Optional[Output] = None
    ):
        self.input = input
        self.output = output

    def _key_bindings(self, scope: CancellationScope) -> KeyBindings:
        bindings = KeyBindings()

        def abandon(event: KeyPressEvent, reason: str) -> None:
            scope.cancel(reason)
            event.app.exit(exception=IterationCancelled(reason))

        @bindings.add("escape", eager=True)
        def _escape(event: KeyPressEvent) -> None:
            abandon(event, "escape pressed")

        @bindings.add("c-c")
        def _interrupt(event: KeyPressEvent) -> None:
            abandon(event, "interrupted")

        return bindings

    def _session(
        self, message: str, scope: CancellationScope, **kwargs
    ) -> PromptSession:
        return PromptSession(
            f"{message} ",
            key_bindings=self._key_bindings(scope),
            input=self.input,
            output=self.output,
            **kwargs,
        )

    async def search(
        self, message: str, suggest: SuggestFn, scope: CancellationScope
    ) -> str:
        """
        Prompt for one of the suggested values, with live filtering.

        Args:
            message: Prompt text
            suggest: Returns suggestions for the text typed so far
            scope: Cancellation scope of the current iteration

        Returns:
            Selected value

        Raises:
            IterationCancelled: If the scope is cancelled
            EOFError: If input ends
        """
        session = self._session(
            message,
            scope,
            completer=SuggestionCompleter(suggest),
            complete_while_typing=True,
            validator=SuggestionValidator(suggest),
            validate_while_typing=False,
        )

        def open_menu() -> None:
            session.default_buffer.start_completion(select_first=False)

        return await scope.run(
            session.prompt_async(pre_run=open_menu, handle_sigint=False)
        )

    async def text(self, message: str, scope: CancellationScope) -> str:
        """
        Prompt for free text, returned verbatim.

        Raises:
            IterationCancelled: If the scope is cancelled
            EOFError: If input ends
        """
        session = self._session(message, scope)
        return await scope.run(session.prompt_async(handle_sigint=False))
