# hackathon_service/services/live_values.py
"""
Shared live subscriptions for values pushed over Redis pub/sub.

Any number of consumers can follow the same key (the confirmed count, one
participant's status). The first consumer opens the underlying channel and
reads the initial value from the database; later consumers get the cached
value straight away and share the same push stream. When the last consumer
leaves, the channel is closed.
"""

import json
import logging
import threading
from typing import Any, Callable, Optional

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

CONFIRMED_COUNT_CHANNEL = "rsvp:confirmed_count"

Listener = Callable[[Any], None]
Closer = Callable[[], None]
ChannelOpener = Callable[[Listener], Closer]


def status_channel(user_id: str) -> str:
    return f"rsvp:status:{user_id}"


class SharedSubscription:
    """One underlying channel fanned out to many listeners."""

    def __init__(self, key: str, open_channel: ChannelOpener):
        self.key = key
        self._open_channel = open_channel
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._closer: Optional[Closer] = None
        self._current: Any = None
        self._has_value = False
        # Bumped on every pushed value so a slow initial read never
        # overwrites a newer push.
        self._version = 0

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    @property
    def current(self) -> Any:
        with self._lock:
            return self._current

    def add(self, listener: Listener) -> bool:
        """
        Registers a listener, opening the channel if this is the first one.

        Returns:
            True if the channel was opened by this call
        """
        with self._lock:
            self._listeners.append(listener)
            if self._closer is not None:
                return False
        try:
            closer = self._open_channel(self.push)
        except Exception:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
            raise
        with self._lock:
            self._closer = closer
        return True

    def remove(self, listener: Listener) -> bool:
        """
        Drops a listener; closes the channel when none remain.

        Returns:
            True if the subscription is now idle
        """
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
            if self._listeners:
                return False
            closer, self._closer = self._closer, None
            self._current = None
            self._has_value = False
        if closer is not None:
            closer()
        return True

    def version(self) -> int:
        with self._lock:
            return self._version

    def push(self, value: Any) -> None:
        with self._lock:
            self._version += 1
            self._store(value)
            listeners = list(self._listeners)
        self._fan_out(listeners, value)

    def seed(self, value: Any, seen_version: int) -> None:
        """Applies an initial point-read unless a push already arrived."""
        with self._lock:
            if self._version != seen_version:
                return
            self._store(value)
            listeners = list(self._listeners)
        self._fan_out(listeners, value)

    def replay(self, listener: Listener) -> None:
        """Hands the cached value to a late subscriber."""
        with self._lock:
            has_value, value = self._has_value, self._current
        if has_value:
            self._fan_out([listener], value)

    def _store(self, value: Any) -> None:
        self._current = value
        self._has_value = True

    def _fan_out(self, listeners: list[Listener], value: Any) -> None:
        for listener in listeners:
            try:
                listener(value)
            except Exception:
                logger.exception(f"Live value listener failed for {self.key}")


class LiveValueHub:
    """Keeps at most one SharedSubscription per key."""

    def __init__(self, channel_factory: Callable[[str], ChannelOpener]):
        self._channel_factory = channel_factory
        self._lock = threading.Lock()
        self._subscriptions: dict[str, SharedSubscription] = {}

    def active_keys(self) -> list[str]:
        with self._lock:
            return list(self._subscriptions)

    def get(self, key: str) -> Optional[SharedSubscription]:
        with self._lock:
            return self._subscriptions.get(key)

    def subscribe(
        self,
        key: str,
        listener: Listener,
        fetch_initial: Callable[[], Any],
    ) -> Callable[[], None]:
        """
        Follows ``key``. Returns an idempotent unsubscribe callable.
        ``fetch_initial`` only runs for the first subscriber of a key.
        """
        with self._lock:
            subscription = self._subscriptions.get(key)
            if subscription is None:
                subscription = SharedSubscription(key, self._channel_factory(key))
                self._subscriptions[key] = subscription
            seen_version = subscription.version()
            try:
                opened = subscription.add(listener)
            except Exception:
                logger.error(f"Failed to open live channel for {key}", exc_info=True)
                if subscription.listener_count == 0:
                    del self._subscriptions[key]
                raise

        if opened:
            try:
                subscription.seed(fetch_initial(), seen_version)
            except Exception:
                logger.error(f"Initial read failed for live value {key}", exc_info=True)
        else:
            subscription.replay(listener)

        done = threading.Event()

        def unsubscribe() -> None:
            if done.is_set():
                return
            done.set()
            with self._lock:
                if subscription.remove(listener):
                    if self._subscriptions.get(key) is subscription:
                        del self._subscriptions[key]

        return unsubscribe


class RedisChannelFactory:
    """Opens a Redis pub/sub channel whose JSON messages feed a listener."""

    def __init__(self, redis_client: Redis, sleep_time: float = 0.5):
        self.redis = redis_client
        self.sleep_time = sleep_time

    def __call__(self, channel: str) -> ChannelOpener:
        def open_channel(on_value: Listener) -> Closer:
            pubsub = self.redis.pubsub(ignore_subscribe_messages=True)

            def handle(message: dict) -> None:
                try:
                    value = json.loads(message["data"])
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring malformed message on {channel}")
                    return
                on_value(value)

            pubsub.subscribe(**{channel: handle})
            worker = pubsub.run_in_thread(sleep_time=self.sleep_time, daemon=True)
            logger.info(f"Opened live channel {channel}")

            def close() -> None:
                # The worker closes the pubsub connection on its way out
                worker.stop()
                logger.info(f"Closed live channel {channel}")

            return close

        return open_channel


class LivePublisher:
    """Pushes RSVP changes to live subscribers. Failures never fail a request."""

    def __init__(self, redis_client: Redis):
        self.redis = redis_client

    def publish_confirmed_count(self, count: int) -> None:
        self._publish(CONFIRMED_COUNT_CHANNEL, count)

    def publish_status(self, user_id: str, status: str) -> None:
        self._publish(status_channel(user_id), status)

    def _publish(self, channel: str, value: Any) -> None:
        try:
            self.redis.publish(channel, json.dumps(value))
        except RedisError as e:
            logger.warning(f"Failed to publish to {channel}: {str(e)}")
