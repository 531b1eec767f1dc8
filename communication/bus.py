import asyncio
import time
from internal.logging import get_logger

TOPIC_GENERATION = "generation"
TOPIC_CONTROL = "control"
TOPICS = (TOPIC_GENERATION, TOPIC_CONTROL)


def _check_topics(topics):
    unknown = set(topics) - set(TOPICS)
    if unknown:
        raise ValueError(f"unknown topic(s): {sorted(unknown)}; expected {list(TOPICS)}")


class TopicCounters:
    __slots__ = ("published", "delivered", "dropped")

    def __init__(self):
        self.published = 0
        self.delivered = 0
        self.dropped = 0

    def to_dict(self):
        return {"published": self.published, "delivered": self.delivered, "dropped": self.dropped}


class Subscriber:
    """One consumer queue. ``last_generation`` is the newest snapshot generation it was handed."""

    __slots__ = ("name", "queue", "topics", "since", "received", "dropped", "last_generation")

    def __init__(self, name, queue, topics):
        self.name = name
        self.queue = queue
        self.topics = frozenset(topics)
        self.since = time.time()
        self.received = 0
        self.dropped = 0
        self.last_generation = None

    def offer(self, topic, item):
        """Non-blocking hand-off; a full queue loses the item."""
        try:
            self.queue.put_nowait(item)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        self.received += 1
        if topic == TOPIC_GENERATION:
            self.last_generation = getattr(item, "generation", self.last_generation)
        return True

    def describe(self):
        return {"name": self.name, "topics": sorted(self.topics), "queued": self.queue.qsize(),
                "received": self.received, "dropped": self.dropped,
                "last_generation": self.last_generation}


class EventBus:
    """Fan-out of generation snapshots and control events.

    Subscriptions are copy-on-write under a lock; ``publish`` walks the current
    tuple without locking, so the tick loop never waits on a slow viewer.
    """

    def __init__(self, queue_size=50):
        self._lock = asyncio.Lock()
        self._subscribers = {}
        self._fanout = ()
        self._queue_size = queue_size
        self._counters = {topic: TopicCounters() for topic in TOPICS}
        self._log = get_logger().bind(component="bus")

    async def subscribe(self, name, topics=TOPICS, max_queue_size=None):
        _check_topics(topics)
        async with self._lock:
            existing = self._subscribers.get(name)
            if existing:
                return existing
            subscriber = Subscriber(name, asyncio.Queue(maxsize=max_queue_size or self._queue_size), topics)
            self._subscribers[name] = subscriber
            self._fanout = tuple(self._subscribers.values())
        self._log.info("subscribed", subscriber=name, topics=sorted(subscriber.topics))
        return subscriber

    async def unsubscribe(self, name):
        async with self._lock:
            if self._subscribers.pop(name, None) is None:
                return False
            self._fanout = tuple(self._subscribers.values())
        self._log.info("unsubscribed", subscriber=name)
        return True

    async def publish(self, topic, item):
        """Offer ``item`` to every subscriber of ``topic``; returns how many took it."""
        _check_topics((topic,))
        counters = self._counters[topic]
        counters.published += 1
        delivered = dropped = 0
        for subscriber in self._fanout:
            if topic not in subscriber.topics:
                continue
            if subscriber.offer(topic, item):
                delivered += 1
            else:
                dropped += 1
        counters.delivered += delivered
        counters.dropped += dropped
        return delivered

    def get_stats(self):
        topics = {topic: counters.to_dict() for topic, counters in self._counters.items()}
        return {
            "subscriber_count": len(self._fanout),
            "published": sum(c["published"] for c in topics.values()),
            "delivered": sum(c["delivered"] for c in topics.values()),
            "dropped": sum(c["dropped"] for c in topics.values()),
            "topics": topics,
        }

    async def get_subscriber_info(self):
        return [subscriber.describe() for subscriber in self._fanout]
