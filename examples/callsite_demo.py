#!/usr/bin/env python3
"""
Call-Site Decoration Demo

Logs from a class method, a coroutine, a generator, a lambda and through a
hidden helper class, and renders every record with the resolved caller.

Usage:
    python examples/callsite_demo.py
    python examples/callsite_demo.py --plain --log-level DEBUG
    python examples/callsite_demo.py --signature --no-namespace
    LOGGER_DECORATION_LOG_LEVEL=DEBUG python examples/callsite_demo.py
"""

import asyncio
import logging

import typer

from logger_decoration import CallerInfo, DecorationConfig, add_logger_decoration
from logger_decoration.utils.for_logger.console_utils import get_console, should_show_rich_output
from logger_decoration.utils.logger_setup import setup_root_logger

app = typer.Typer(add_completion=False)


class AuditTrail:
    """Logging helper that should never show up as the caller."""

    @staticmethod
    def record(log, message: str) -> None:
        log.info(f"[bold]audit[/bold] {message}")


class OrderService:
    def __init__(self, log):
        self.log = log

    def place(self, order_id: int) -> None:
        self.log.info(f"Placing order {order_id}")
        AuditTrail.record(self.log, f"order {order_id} placed")

    async def settle(self, order_id: int) -> None:
        await asyncio.sleep(0)
        self.log.info(f"Settled order {order_id} after await")

    def lines(self, count: int):
        for number in range(count):
            self.log.debug(f"Yielding line {number}")
            yield number

    def notify_all(self, order_ids: list[int]) -> None:
        notify = lambda order_id: self.log.warning(f"Notifying customer of order {order_id}")  # noqa: E731
        for order_id in order_ids:
            notify(order_id)


@app.command()
def main(
    log_level: str = typer.Option("DEBUG", "--log-level", "-l", help="Console log level"),
    plain: bool = typer.Option(False, "--plain", help="Use colorlog instead of Rich"),
    signature: bool = typer.Option(False, "--signature", help="Render method signatures"),
    namespace: bool = typer.Option(True, "--namespace/--no-namespace", help="Prefix class names with their namespace"),
):
    """Run the call-site decoration demo."""
    config = DecorationConfig.from_env(
        log_level=log_level,
        use_rich=not plain,
        include_signature=signature,
        include_namespace=namespace,
    )
    factory = add_logger_decoration(config=config, hidden_types=[AuditTrail])
    setup_root_logger(config=config, resolver=factory.resolver)
    if should_show_rich_output():
        get_console().rule(f"[bold]Call-site decoration demo[/bold] (level {config.log_level})")

    log = factory.get_logger()
    service = OrderService(log)

    service.place(1001)
    asyncio.run(service.settle(1001))
    list(service.lines(2))
    service.notify_all([1001, 1002])
    log.error("Explicit caller", caller=CallerInfo("billing.Importer", "run", "importer.py", 42))

    # Undecorated stdlib logger: the root handler's CallSiteFilter fills in the call site
    logging.getLogger("plain").info("Logged through a plain stdlib logger")


if __name__ == "__main__":
    app()
