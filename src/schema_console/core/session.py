"""Interactive table -> column -> predicate -> execute session."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from enum import Enum
from functools import partial
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict

from schema_console.core.cancellation import CancellationScope
from schema_console.core.executor import QueryExecutor
from schema_console.errors import CatalogInvariantError, IterationCancelled
from schema_console.models.catalog import SchemaCatalog
from schema_console.models.query import QueryResult
from schema_console.models.table import TableDefinition
from schema_console.utils.table_format import render_result

logger = logging.getLogger(__name__)


class Suggestion(BaseModel):
    """One entry of a live suggestion list."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str


SuggestFn = Callable[[str], list[Suggestion]]


class Prompter(Protocol):
    """Interactive prompt primitives used by the session.

    Both methods raise IterationCancelled once ``scope`` is cancelled and
    EOFError when the operator ends input.
    """

    async def search(
        self, message: str, suggest: SuggestFn, scope: CancellationScope
    ) -> str: ...

    async def text(self, message: str, scope: CancellationScope) -> str: ...


class SessionState(str, Enum):
    IDLE = "idle"
    SELECT_TABLE = "select_table"
    SELECT_COLUMN = "select_column"
    SUPPLY_PREDICATE = "supply_predicate"
    EXECUTE = "execute"


class IterationOutcome(str, Enum):
    CANCELLED = "cancelled"
    EXECUTED = "executed"
    FAILED = "failed"


def filter_suggestions(names: Iterable[str], partial_input: str) -> list[Suggestion]:
    """Case-sensitive substring filter; empty input matches everything."""
    return [
        Suggestion(label=name, value=name)
        for name in names
        if not partial_input or partial_input in name
    ]


class SessionController:
    """Runs the progressive-narrowing query loop over a frozen catalog."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        executor: QueryExecutor,
        prompter: Prompter,
        echo: Callable[[str], None] = print,
    ):
        """
        Initialize session controller.

        Args:
            catalog: Reflected schema catalog (read-only)
            executor: Query executor bound to the live connection
            prompter: Prompt implementation
            echo: Output sink for rendered results and error messages
        """
        self.catalog = catalog
        self.executor = executor
        self.prompter = prompter
        self.echo = echo
        self._state = SessionState.IDLE
        self._scope: Optional[CancellationScope] = None
        self._stopping = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_scope(self) -> Optional[CancellationScope]:
        return self._scope

    @property
    def stopping(self) -> bool:
        return self._stopping

    def suggest_tables(self, partial_input: str) -> list[Suggestion]:
        return filter_suggestions(self.catalog.table_names, partial_input)

    def suggest_columns(
        self, table: TableDefinition, partial_input: str
    ) -> list[Suggestion]:
        return filter_suggestions(table.column_names, partial_input)

    def interrupt(self) -> None:
        """Abandon the current iteration (bound to SIGINT)."""
        if self._scope is not None:
            self._scope.cancel("interrupted")

    def stop(self) -> None:
        """Request shutdown: abandon the current iteration and leave the loop."""
        self._stopping = True
        if self._scope is not None:
            self._scope.cancel("shutting down")

    async def run_iteration(self) -> IterationOutcome:
        """
        Run one table -> column -> predicate -> execute pass.

        Returns:
            How the iteration ended

        Raises:
            CatalogInvariantError: If the selected table is not in the catalog
            EOFError: If the operator ended input
        """
        scope = CancellationScope()
        self._scope = scope
        if self._stopping:
            scope.cancel("shutting down")

        try:
            self._state = SessionState.SELECT_TABLE
            table_name = await self.prompter.search(
                "Table?", self.suggest_tables, scope
            )

            table = self.catalog.lookup(table_name)
            if table is None:
                raise CatalogInvariantError(
                    f"Selected table '{table_name}' is not in the catalog"
                )

            self._state = SessionState.SELECT_COLUMN
            column = await self.prompter.search(
                "Column?", partial(self.suggest_columns, table), scope
            )

            self._state = SessionState.SUPPLY_PREDICATE
            predicate = await self.prompter.text("Query?", scope)

            self._state = SessionState.EXECUTE
            result = await self.executor.execute(table.name, column, predicate)
            self.present(result)
        except IterationCancelled as e:
            logger.debug(f"Iteration abandoned in {self._state.value}: {e.reason}")
            return IterationOutcome.CANCELLED
        finally:
            self._state = SessionState.IDLE

        if result.succeeded:
            return IterationOutcome.EXECUTED
        return IterationOutcome.FAILED

    def present(self, result: QueryResult) -> None:
        """Print rows as a table, or the error message."""
        if result.succeeded:
            self.echo(render_result(result))
        else:
            self.echo(f"Error: {result.error}")
        self.echo("")

    async def run(self) -> None:
        """Repeat iterations until stop() is called or input ends."""
        logger.info(f"Session started with {len(self.catalog)} tables")
        while not self._stopping:
            try:
                await self.run_iteration()
            except EOFError:
                logger.info("End of input")
                self._stopping = True
            # Let signal callbacks queued during the iteration run
            await asyncio.sleep(0)
        self._scope = None
        logger.info("Session stopped")
