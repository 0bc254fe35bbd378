"""Unit tests for AggregateState."""

import pytest

from feedwatch.models import Feed, Post
from feedwatch.state import AggregateState, OperationPhase, StateChange


def feed(state, url="https://example.com/feed.xml"):
    return Feed(id=state.next_id(), url=url, title="Example", link="https://example.com/", description="")


class TestAggregateState:
    """Tests for AggregateState."""

    def test_initial(self, state):
        assert state.feeds == ()
        assert state.posts == ()
        assert state.phase is OperationPhase.IDLE
        assert state.last_error is None

    def test_ids_unique_and_increasing(self, state):
        ids = [state.next_id() for _ in range(3)]
        assert ids == ["1", "2", "3"]
        assert AggregateState().next_id() == "1"

    def test_append_feed_rejects_duplicate_url(self, state):
        state.append_feed(feed(state))
        with pytest.raises(ValueError):
            state.append_feed(feed(state))
        assert len(state.feeds) == 1

    def test_append_posts_requires_known_feed(self, state):
        with pytest.raises(ValueError):
            state.append_posts([Post(id="5", feed_id="404", title="x", link="", description="")])
        assert state.posts == ()

    def test_posts_for(self, state):
        a = feed(state, "https://a.test/")
        b = feed(state, "https://b.test/")
        state.append_feed(a)
        state.append_feed(b)
        state.append_posts([
            Post(id="10", feed_id=a.id, title="a1", link="", description=""),
            Post(id="11", feed_id=b.id, title="b1", link="", description=""),
        ])
        assert [p.title for p in state.posts_for(a.id)] == ["a1"]
        assert state.feed_urls() == {"https://a.test/", "https://b.test/"}

    def test_containers_are_read_only_views(self, state):
        state.append_feed(feed(state))
        assert isinstance(state.feeds, tuple)
        assert isinstance(state.posts, tuple)


class TestSubscribe:
    """Change notifications."""

    def test_events(self, state):
        changes = []
        state.subscribe(changes.append)
        f = feed(state)
        state.append_feed(f)
        post = Post(id="7", feed_id=f.id, title="x", link="", description="")
        state.append_posts([post])
        state.append_posts([])
        state.phase = OperationPhase.SUBMITTING
        state.phase = OperationPhase.SUBMITTING
        state.last_error = "networkError"
        assert changes == [
            StateChange("feed_added", f),
            StateChange("posts_added", (post,)),
            StateChange("phase_changed", OperationPhase.SUBMITTING),
            StateChange("error_changed", "networkError"),
        ]

    def test_unsubscribe(self, state):
        changes = []
        unsubscribe = state.subscribe(changes.append)
        unsubscribe()
        unsubscribe()
        state.phase = OperationPhase.FAILED
        assert changes == []

    def test_failing_listener_does_not_block_others(self, state):
        seen = []

        def broken(change):
            raise RuntimeError("boom")

        state.subscribe(broken)
        state.subscribe(seen.append)
        state.last_error = "urlDownloadError"
        assert state.last_error == "urlDownloadError"
        assert len(seen) == 1
