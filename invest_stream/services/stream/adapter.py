"""Bridge between transport receive events and caller callbacks."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from ...config.logging import get_logger

logger = get_logger(__name__)

StreamProcessor = Callable[[Any], Union[None, Awaitable[None]]]
ErrorHandler = Callable[[BaseException], Any]
CompletionHandler = Callable[[], Any]


class PushCallbackAdapter:
    """Forwards every inbound push message to a processor.

    ``on_message`` calls the processor with the message unmodified, on the
    task the transport delivers on. No queuing, filtering or reordering.
    ``on_error`` calls the error handler if one was supplied; without one the
    error is dropped after a warning is logged. ``on_completed`` is a no-op
    unless an optional completion handler was supplied.

    If the processor returns an awaitable, :meth:`deliver` awaits it before
    returning so the next message is not delivered until it finishes.
    """

    def __init__(
        self,
        processor: StreamProcessor,
        error_handler: Optional[ErrorHandler] = None,
        completion_handler: Optional[CompletionHandler] = None,
    ):
        self._processor = processor
        self._error_handler = error_handler
        self._completion_handler = completion_handler

    def on_message(self, message: Any) -> Union[None, Awaitable[None]]:
        return self._processor(message)

    async def deliver(self, message: Any) -> None:
        """Invoke the processor and await its result if it is awaitable."""
        result = self.on_message(message)
        if inspect.isawaitable(result):
            await result

    def on_error(self, error: BaseException) -> None:
        if self._error_handler is None:
            logger.warning(
                "stream_error_dropped",
                error=str(error),
                error_type=type(error).__name__,
            )
            return
        self._error_handler(error)

    def on_completed(self) -> None:
        if self._completion_handler is not None:
            self._completion_handler()
