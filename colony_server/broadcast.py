"""Fan-out of tick reports to any number of subscribers.

Each subscriber owns an unbounded ``asyncio.Queue`` bound to the event loop
it subscribed from. ``publish`` only enqueues, so a slow or vanished
subscriber never blocks the publisher or anyone else. Delivery always goes
through ``loop.call_soon_threadsafe``, whose callback queue is FIFO no matter
which thread publishes. A subscriber whose loop has stopped or closed is
dropped at the next publish.
"""

import asyncio
import itertools
import logging
import threading
from typing import Dict, List, Optional

from colony.reports import TickReport

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class Subscription:
    """An async stream of tick reports published after it was created.

    Iterate with ``async for``; the stream ends when the broadcaster closes
    or :meth:`close` is called.
    """

    def __init__(
        self,
        broadcaster: "TickBroadcaster",
        subscriber_id: int,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self.id = subscriber_id
        self._broadcaster = broadcaster
        self._loop = loop
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._finished = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Reports queued but not yet consumed."""
        return self._queue.qsize()

    def _deliver(self, item: object) -> bool:
        """Enqueue without blocking. Returns False if the loop is not running.

        Every item goes through ``call_soon_threadsafe``, even from the
        subscriber's own loop; the callback queue is the single ordering path.
        """
        if not self._loop.is_running():
            return False
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)
        except RuntimeError:
            # Event loop closed underneath us
            return False
        return True

    def _end(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._deliver(_END_OF_STREAM)

    def close(self) -> None:
        """Stop receiving reports. Other subscribers are unaffected."""
        self._broadcaster.unsubscribe(self)
        self._end()

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> TickReport:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            self._finished = True
            raise StopAsyncIteration
        return item

    async def get(self, timeout: Optional[float] = None) -> TickReport:
        """Wait for the next report.

        Raises:
            StopAsyncIteration: If the stream has ended.
            asyncio.TimeoutError: If ``timeout`` elapses first.
        """
        return await asyncio.wait_for(self.__anext__(), timeout)


class TickBroadcaster:
    """Registry of subscribers plus ordered, non-blocking publication."""

    def __init__(self) -> None:
        self._subscribers: Dict[int, Subscription] = {}
        self._registry_lock = threading.Lock()
        self._ids = itertools.count(1)
        self._closed = False
        self.published_count = 0

    @property
    def subscriber_count(self) -> int:
        with self._registry_lock:
            return len(self._subscribers)

    def subscribe(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscription:
        """Register a new subscriber on ``loop`` (default: the running loop).

        No history is replayed; the subscriber sees reports published from
        now on. Subscribing after :meth:`close` returns an already-ended stream.
        """
        loop = loop or asyncio.get_running_loop()
        with self._registry_lock:
            subscription = Subscription(self, next(self._ids), loop)
            if self._closed:
                subscription._end()
                return subscription
            self._subscribers[subscription.id] = subscription
            count = len(self._subscribers)
        logger.debug("Subscriber %d connected (%d total)", subscription.id, count)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._registry_lock:
            removed = self._subscribers.pop(subscription.id, None)
            count = len(self._subscribers)
        if removed is not None:
            logger.debug("Subscriber %d disconnected (%d remaining)", subscription.id, count)

    def publish(self, report: TickReport) -> int:
        """Hand ``report`` to every current subscriber.

        Returns:
            Number of subscribers the report was queued for.
        """
        delivered = 0
        dropped: List[Subscription] = []
        with self._registry_lock:
            if self._closed:
                return 0
            self.published_count += 1
            for subscription in self._subscribers.values():
                if subscription._deliver(report):
                    delivered += 1
                else:
                    dropped.append(subscription)
            for subscription in dropped:
                del self._subscribers[subscription.id]
                subscription._closed = True

        if dropped:
            logger.info("Dropped %d subscribers whose event loop stopped", len(dropped))
        return delivered

    def close(self) -> None:
        """End every subscriber stream and refuse new publications."""
        with self._registry_lock:
            self._closed = True
            subscribers = list(self._subscribers.values())
            self._subscribers.clear()
        for subscription in subscribers:
            subscription._end()
        if subscribers:
            logger.info("Broadcaster closed, released %d subscribers", len(subscribers))
