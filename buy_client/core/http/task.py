"""
Cancellable handle for an in-flight request.

Every public operation returns a ``RequestTask`` synchronously. The task
delivers exactly one result: to the optional completion callback (unpacked as
positional arguments) and to anyone awaiting the task.
"""

import asyncio
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from buy_client.core.http.exceptions import BuyClientError, RequestCancelledError
from buy_client.core.logging import get_logger

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=tuple)


class RequestTask(Generic[ResultT]):
    """
    Awaitable, cancellable wrapper around an ``asyncio.Task``.

    Args:
        coro: Coroutine producing the result tuple. It reports failures as
            values and should not raise.
        failure: Builds the result tuple for an error (used for cancellation
            and for exceptions escaping ``coro``).
        callback: Called once with the unpacked result (optional)
        description: Short label used in log messages (optional)

    Must be created while an event loop is running.
    """

    def __init__(
        self,
        coro: Awaitable[ResultT],
        failure: Callable[[BuyClientError], ResultT],
        callback: Optional[Callable[..., Any]] = None,
        description: str = "request"
    ):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if asyncio.iscoroutine(coro):
                coro.close()
            raise
        self.description = description
        self._failure = failure
        self._callback = callback
        self._outcome: asyncio.Future = loop.create_future()
        self._task = loop.create_task(coro)
        self._task.add_done_callback(self._on_done)

    def cancel(self) -> bool:
        """
        Request cancellation.

        Returns:
            False if the result was already delivered, True otherwise
        """
        if self._outcome.done():
            return False
        return self._task.cancel()

    def done(self) -> bool:
        """Whether the result has been delivered."""
        return self._outcome.done()

    def cancelled(self) -> bool:
        """Whether the request ended because it was cancelled."""
        return self._task.cancelled()

    def result(self) -> ResultT:
        """Return the delivered result. Raises InvalidStateError before completion."""
        return self._outcome.result()

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            result = self._failure(
                RequestCancelledError(f"{self.description} was cancelled")
            )
        else:
            exc = task.exception()
            if exc is None:
                result = task.result()
            else:
                logger.error(f"Unexpected error in {self.description}: {exc}", exc_info=exc)
                result = self._failure(
                    BuyClientError(
                        message=f"Unexpected error during {self.description}: {exc}",
                        original_error=exc
                    )
                )

        if self._callback is not None:
            try:
                self._callback(*result)
            except Exception:
                logger.exception(f"Completion callback for {self.description} raised")

        self._outcome.set_result(result)

    async def _wait(self) -> ResultT:
        try:
            return await asyncio.shield(self._outcome)
        except asyncio.CancelledError:
            # whoever awaited us was cancelled, so the request is no longer wanted
            self.cancel()
            raise

    def __await__(self):
        return self._wait().__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"<RequestTask {self.description} {state}>"
