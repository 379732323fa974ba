"""
Error Handler
Process-wide observers for uncaught exceptions and unhandled task failures
"""

import asyncio
import sys
import threading
from types import TracebackType
from typing import Any, Dict, Optional, Type

from utils.logger import get_logger


class ErrorHandler:
    """Logs failures that escape every other handler instead of crashing."""

    def __init__(self):
        self.logger = get_logger("ErrorHandler")
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None

    @property
    def initialized(self) -> bool:
        return self.loop is not None

    def initialize(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Install the global handlers. Calling this again is a no-op.

        Args:
            loop: Event loop to observe (default: the running loop)
        """
        if self.initialized:
            return

        if loop is None:
            loop = asyncio.get_running_loop()

        loop.set_exception_handler(self._async_exception_handler)
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook
        self._previous_threading_excepthook = threading.excepthook
        threading.excepthook = self._threading_excepthook
        self.loop = loop

        self.logger.info("Error handlers initialized")

    def shutdown(self) -> None:
        """Restore the handlers that were active before initialize()."""
        if not self.initialized:
            return

        self.loop.set_exception_handler(None)
        if self._previous_excepthook is not None:
            sys.excepthook = self._previous_excepthook
        if self._previous_threading_excepthook is not None:
            threading.excepthook = self._previous_threading_excepthook
        self.loop = None
        self._previous_excepthook = None
        self._previous_threading_excepthook = None

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        """Handle exceptions from tasks and callbacks nobody awaited."""
        exception = context.get("exception")
        message = context.get("message", "Unknown async error")
        if exception is not None:
            self.logger.error(
                f"UNHANDLED REJECTION: {message}",
                exc_info=(type(exception), exception, exception.__traceback__),
            )
        else:
            self.logger.error(f"UNHANDLED REJECTION: {message}")

    def _excepthook(
        self,
        exc_type: Type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        """Handle exceptions that reached the top level uncaught."""
        if issubclass(exc_type, KeyboardInterrupt) and self._previous_excepthook is not None:
            self._previous_excepthook(exc_type, exc, tb)
            return
        self.logger.error(f"EXCEPTION CAUGHT: {exc}", exc_info=(exc_type, exc, tb))

    def _threading_excepthook(self, args: threading.ExceptHookArgs) -> None:
        """Handle exceptions that escaped a worker thread."""
        if args.exc_type is SystemExit:
            return
        name = args.thread.name if args.thread is not None else "unknown"
        self.logger.error(
            f"THREAD EXCEPTION CAUGHT in {name}: {args.exc_value}",
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler

