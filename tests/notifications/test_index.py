"""Tests for SubscriptionIndex."""

from puzzlebox.notifications import SubscriptionIndex

URI_A = "puzzlebox://puzzle/puzzle-a"
URI_B = "puzzlebox://puzzle/puzzle-b"


def test_subscribe_is_idempotent():
    index = SubscriptionIndex()

    assert index.subscribe(URI_A, "s1")
    assert not index.subscribe(URI_A, "s1")
    assert index.subscribers(URI_A) == {"s1"}


def test_unsubscribe_is_idempotent_and_drops_empty_uris():
    index = SubscriptionIndex()
    index.subscribe(URI_A, "s1")

    assert index.unsubscribe(URI_A, "s1")
    assert not index.unsubscribe(URI_A, "s1")
    assert not index.unsubscribe(URI_B, "s1")
    assert URI_A not in index
    assert len(index) == 0


def test_subscribers_returns_snapshot():
    index = SubscriptionIndex()
    index.subscribe(URI_A, "s1")

    snapshot = index.subscribers(URI_A)
    index.subscribe(URI_A, "s2")

    assert snapshot == {"s1"}
    assert index.subscribers(URI_B) == frozenset()


def test_remove_subscriber_leaves_every_resource():
    index = SubscriptionIndex()
    index.subscribe(URI_A, "s1")
    index.subscribe(URI_B, "s1")
    index.subscribe(URI_B, "s2")

    removed = index.remove_subscriber("s1")

    assert sorted(removed) == [URI_A, URI_B]
    assert index.uris_for("s1") == []
    assert index.subscribers(URI_B) == {"s2"}
    assert index.uris() == [URI_B]


def test_remove_unknown_subscriber_is_noop():
    index = SubscriptionIndex()
    index.subscribe(URI_A, "s1")

    assert index.remove_subscriber("ghost") == []
    assert index.is_subscribed(URI_A, "s1")


def test_clear_drops_everything():
    index = SubscriptionIndex()
    index.subscribe(URI_A, "s1")
    index.subscribe(URI_B, "s2")

    index.clear()

    assert index.uris() == []
    assert len(index) == 0
