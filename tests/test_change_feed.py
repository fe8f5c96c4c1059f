import asyncio
import json

from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.services import change_feed
from storefront.services.change_feed import ChangeFeed


class FakeRedis:
    def __init__(self, failures=0):
        self.failures = failures
        self.published = []

    def publish(self, channel, payload):
        if self.failures:
            self.failures -= 1
            raise RedisConnectionError("redis is down")
        self.published.append((channel, json.loads(payload)))
        return 1


def make_feed(fake):
    feed = ChangeFeed(url="redis://localhost:6379/0", channel="test:changes")
    feed.redis = fake
    return feed


def test_publish_sends_change():
    fake = FakeRedis()

    assert make_feed(fake).publish("orders", "INSERT", 5) is True
    assert fake.published == [("test:changes", {"table": "orders", "event": "INSERT", "id": 5})]


def test_publish_retries_transient_errors():
    fake = FakeRedis(failures=1)

    assert make_feed(fake).publish("products", "UPDATE", 2) is True
    assert len(fake.published) == 1


def test_publish_failure_does_not_raise(monkeypatch):
    feed = make_feed(FakeRedis())

    def down(payload):
        raise RedisConnectionError("redis is down")

    monkeypatch.setattr(feed, "_publish", down)

    assert feed.publish("orders", "INSERT", 1) is False


class FakePubSub:
    def __init__(self, messages):
        self.messages = messages
        self.subscribed = []
        self.unsubscribed = []
        self.closed = False

    async def subscribe(self, channel):
        self.subscribed.append(channel)

    async def listen(self):
        for message in self.messages:
            yield message

    async def unsubscribe(self, channel):
        self.unsubscribed.append(channel)

    async def aclose(self):
        self.closed = True


class FakeAsyncRedis:
    def __init__(self, pubsub):
        self._pubsub = pubsub
        self.closed = False

    def pubsub(self):
        return self._pubsub

    async def aclose(self):
        self.closed = True


def test_listen_yields_decoded_changes_only(monkeypatch):
    pubsub = FakePubSub([
        {"type": "subscribe", "channel": "test:changes", "data": 1},
        {"type": "message", "channel": "test:changes", "data": "not json"},
        {"type": "message", "channel": "test:changes", "data": json.dumps({"table": "orders", "event": "INSERT", "id": 3})},
    ])
    client = FakeAsyncRedis(pubsub)
    monkeypatch.setattr(change_feed.aioredis, "from_url", lambda url, **kwargs: client)
    feed = make_feed(FakeRedis())

    async def collect():
        return [event async for event in feed.listen()]

    events = asyncio.run(collect())

    assert events == [{"table": "orders", "event": "INSERT", "id": 3}]
    assert pubsub.subscribed == ["test:changes"]
    assert pubsub.unsubscribed == ["test:changes"]
    assert pubsub.closed and client.closed


def test_listen_unsubscribes_when_consumer_stops(monkeypatch):
    pubsub = FakePubSub([
        {"type": "message", "channel": "test:changes", "data": json.dumps({"table": "products", "event": "UPDATE", "id": 1})},
        {"type": "message", "channel": "test:changes", "data": json.dumps({"table": "products", "event": "UPDATE", "id": 2})},
    ])
    client = FakeAsyncRedis(pubsub)
    monkeypatch.setattr(change_feed.aioredis, "from_url", lambda url, **kwargs: client)
    feed = make_feed(FakeRedis())

    async def first_only():
        events = feed.listen()
        event = await events.__anext__()
        await events.aclose()
        return event

    assert asyncio.run(first_only())["id"] == 1
    assert pubsub.unsubscribed == ["test:changes"]
    assert client.closed
