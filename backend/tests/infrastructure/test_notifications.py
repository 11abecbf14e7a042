"""Change Notifier - fire-and-forget delivery to listeners and subscriptions.

Tests cover:
    - Listeners receive events; failing listeners never break notify()
    - notify() with no listener is not an error
    - Subscriptions receive events published after subscribe()
    - Full subscriber queues drop events instead of blocking
"""

from simpledb.core.domain_types import Operation
from simpledb.infrastructure.notifications import ChangeNotifier


def test_notify_without_listeners_is_not_an_error():
    event = ChangeNotifier().notify("content://p/items", Operation.CREATE)
    assert event.uri == "content://p/items"


def test_listener_receives_event():
    notifier = ChangeNotifier()
    seen = []
    notifier.add_listener(seen.append)
    notifier.notify("content://p/items/1", Operation.UPDATE)
    assert [(e.uri, e.operation) for e in seen] == [
        ("content://p/items/1", Operation.UPDATE),
    ]


def test_failing_listener_does_not_stop_others():
    notifier = ChangeNotifier()
    seen = []

    def broken(event):
        raise RuntimeError("observer crashed")

    notifier.add_listener(broken)
    notifier.add_listener(seen.append)
    notifier.notify("content://p/items", Operation.DELETE)
    assert len(seen) == 1


def test_removed_listener_gets_nothing():
    notifier = ChangeNotifier()
    seen = []
    notifier.add_listener(seen.append)
    notifier.remove_listener(seen.append)
    notifier.notify("content://p/items", Operation.DELETE)
    assert seen == []


async def test_subscription_receives_events_in_order():
    notifier = ChangeNotifier()
    subscription = notifier.subscribe()
    notifier.notify("content://p/items", Operation.CREATE)
    notifier.notify("content://p/items/1", Operation.DELETE)
    first = await subscription.__anext__()
    second = await subscription.__anext__()
    assert (first.uri, second.uri) == ("content://p/items", "content://p/items/1")


def test_full_queue_drops_event():
    notifier = ChangeNotifier(queue_size=1)
    subscription = notifier.subscribe()
    notifier.notify("content://p/a", Operation.CREATE)
    notifier.notify("content://p/b", Operation.CREATE)
    assert subscription.queue.qsize() == 1
    assert subscription.queue.get_nowait().uri == "content://p/a"


def test_closed_subscription_is_removed():
    notifier = ChangeNotifier()
    subscription = notifier.subscribe()
    assert notifier.subscriber_count == 1
    subscription.close()
    assert notifier.subscriber_count == 0


def test_event_to_dict():
    event = ChangeNotifier().notify("content://p/items", Operation.CREATE)
    data = event.to_dict()
    assert data["uri"] == "content://p/items"
    assert data["operation"] == "create"
    assert "timestamp" in data
