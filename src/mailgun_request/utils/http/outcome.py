"""Single-resolution outcome delivery.

A call produces exactly one :class:`Outcome`. It is published once on an
:class:`OutcomeChannel`, which forwards it to every subscriber. The
dispatcher subscribes two adapters: one settling an ``asyncio.Future``
that the caller awaits, and one invoking the caller's error-first
callback ``callback(error, body)``.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Union

Subscriber = Callable[["Outcome"], Union[None, Awaitable[Any]]]
Callback = Callable[[Optional[BaseException], Any], Any]


@dataclass(frozen=True)
class Outcome:
    """Result of one call: a parsed body or an error, never both."""

    body: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, body: Any) -> "Outcome":
        return cls(body=body)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome":
        return cls(error=error)


def noop(error: Optional[BaseException], body: Any) -> None:
    """Default callback."""


class OutcomeChannel:
    """Broadcast one outcome to all subscribers, exactly once."""

    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []
        self._outcome: Optional[Outcome] = None

    @property
    def published(self) -> bool:
        return self._outcome is not None

    def subscribe(self, subscriber: Subscriber) -> None:
        if self.published:
            raise RuntimeError("Cannot subscribe after the outcome was published")
        self._subscribers.append(subscriber)

    async def publish(self, outcome: Outcome) -> None:
        """Deliver ``outcome`` to every subscriber in subscription order.

        All subscribers are notified even if one of them raises; the
        first exception is re-raised afterwards.

        :param outcome: The call's outcome
        :raises RuntimeError: If an outcome was already published
        """
        if self.published:
            raise RuntimeError("Outcome already published")
        self._outcome = outcome

        first_error: Optional[BaseException] = None
        for subscriber in self._subscribers:
            try:
                result = subscriber(outcome)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error


def future_adapter(future: "asyncio.Future[Any]") -> Subscriber:
    """Subscriber settling ``future`` with the outcome."""

    def _settle(outcome: Outcome) -> None:
        if future.done():
            return
        if outcome.ok:
            future.set_result(outcome.body)
        else:
            future.set_exception(outcome.error)

    return _settle


def callback_adapter(callback: Optional[Callback]) -> Subscriber:
    """Subscriber invoking an error-first callback.

    Coroutine functions are supported; their result is awaited.
    """
    callback = callback or noop

    def _invoke(outcome: Outcome) -> Any:
        return callback(outcome.error, outcome.body)

    return _invoke
