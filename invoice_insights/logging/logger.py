import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class ContextFormatter(logging.Formatter):
    """Appends keyword context (unit id, file name, ...) as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return base
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{base} | {pairs}"


class Log:
    """Centralized logging for ingestion, dispatch and export events."""

    _logger: logging.Logger = logging.getLogger("invoice_insights")

    @classmethod
    def configure(cls, log_level: str, console: Console | None = None) -> None:
        """Configure the logger level and attach a single handler.

        A rich console handler is used when the CLI passes its console,
        a plain stdout handler otherwise.
        """
        cls._logger.setLevel(log_level.upper())
        if cls._logger.handlers:
            return
        handler: logging.Handler
        if console is not None:
            handler = RichHandler(console=console, show_path=False, markup=False)
            handler.setFormatter(ContextFormatter("%(message)s"))
        else:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                ContextFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
        cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(message, extra=context)

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(message, extra=context)

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(message, extra=context)

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(message, extra=context)
