"""Console bootstrap: configure, connect, reflect, then run the session."""

import asyncio
import logging
import os
import signal
import sys

from schema_console.core import (
    CatalogReflector,
    DatabaseConnection,
    QueryExecutor,
    SessionController,
    build_catalog,
)
from schema_console.models.config import DatabaseConfig
from schema_console.prompts import PromptToolkitPrompter

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def install_signal_handlers(controller: SessionController) -> list[signal.Signals]:
    """
    Route process signals to the session.

    SIGINT abandons the current iteration; SIGTERM and SIGHUP end the session.
    Signal handlers are not available on Windows, where nothing is installed.

    Returns:
        Signals that were installed
    """
    if os.name == "nt":
        return []

    loop = asyncio.get_running_loop()
    handlers = {
        signal.SIGINT: controller.interrupt,
        signal.SIGTERM: controller.stop,
        signal.SIGHUP: controller.stop,
    }
    for sig, handler in handlers.items():
        loop.add_signal_handler(sig, handler)
    return list(handlers)


async def main() -> None:
    """Run the console until the session stops."""
    config = DatabaseConfig.from_env()
    configure_logging(config.log_level)

    connection = DatabaseConnection(config)
    try:
        await connection.open()

        # Reflection must complete before the session may start
        catalog = await build_catalog(
            CatalogReflector(connection, schema=config.schema_name)
        )

        controller = SessionController(
            catalog, QueryExecutor(connection), PromptToolkitPrompter()
        )
        installed = install_signal_handlers(controller)
        try:
            await controller.run()
        finally:
            loop = asyncio.get_running_loop()
            for sig in installed:
                loop.remove_signal_handler(sig)
    finally:
        await connection.close()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'schema-console' console script.
    """
    # asyncpg requires SelectorEventLoop on Windows
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"schema-console failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli_entry()
