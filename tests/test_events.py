# tests/test_events.py

from barberqueue.events import QueueEventBus


def test_versions_are_per_shop():
    bus = QueueEventBus()
    assert bus.version(1) == 0

    bus.publish(1, "created", 10)
    bus.publish(1, "started", 10)
    bus.publish(2, "created", 11)

    assert bus.version(1) == 2
    assert bus.version(2) == 1


def test_subscribers_only_see_their_shop():
    bus = QueueEventBus()
    seen = []
    bus.subscribe(1, seen.append)

    bus.publish(2, "created", 5)
    event = bus.publish(1, "created", 6)

    assert seen == [event]
    assert (event.shop_id, event.kind, event.appointment_id, event.version) == (1, "created", 6, 1)


def test_failing_subscriber_does_not_stop_others():
    bus = QueueEventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(1, broken)
    bus.subscribe(1, seen.append)

    bus.publish(1, "deleted", 3)
    assert len(seen) == 1


def test_unsubscribe():
    bus = QueueEventBus()
    seen = []
    unsubscribe = bus.subscribe(1, seen.append)

    bus.publish(1, "created", 1)
    unsubscribe()
    unsubscribe()
    bus.publish(1, "created", 2)

    assert [e.appointment_id for e in seen] == [1]
