"""
Unit tests for relay.subscriptions module.

Tests:
- Subscription matching across OR'd filters
- SubscriptionRegistry open/replace/close lifecycle
- matching() only returns open subscriptions
"""

from unittest.mock import MagicMock

from mockstr.models import Filter
from mockstr.relay.subscriptions import Subscription, SubscriptionRegistry


class TestSubscription:
    """Subscription dataclass."""

    def test_filters_coerced_to_tuple(self):
        sub = Subscription("s", [Filter(kinds={1})], MagicMock())
        assert isinstance(sub.filters, tuple)

    def test_matches(self, make_event):
        sub = Subscription("s", (Filter(kinds={1}), Filter(kinds={1621})), MagicMock())
        assert sub.matches(make_event(1621)) is True
        assert sub.matches(make_event(1617)) is False

    def test_no_filters_never_matches(self, make_event):
        assert Subscription("s", (), MagicMock()).matches(make_event()) is False


class TestRegistry:
    """SubscriptionRegistry lifecycle."""

    def test_open(self):
        session = MagicMock()
        registry = SubscriptionRegistry(session)
        sub = registry.open("issues", [Filter(kinds={1621})])
        assert "issues" in registry
        assert registry.get("issues") is sub
        assert sub.session is session

    def test_reopen_replaces_filters(self, make_event):
        registry = SubscriptionRegistry(MagicMock())
        registry.open("sub", [Filter(kinds={1})])
        registry.open("sub", [Filter(kinds={1621})])
        assert len(registry) == 1
        assert registry.matching(make_event(1)) == []
        assert [s.id for s in registry.matching(make_event(1621))] == ["sub"]

    def test_close(self):
        registry = SubscriptionRegistry(MagicMock())
        registry.open("sub", [Filter()])
        assert registry.close("sub") is True
        assert "sub" not in registry
        assert registry.close("sub") is False

    def test_closed_subscription_receives_nothing(self, make_event):
        registry = SubscriptionRegistry(MagicMock())
        registry.open("sub", [Filter()])
        registry.close("sub")
        assert registry.matching(make_event()) == []

    def test_close_all(self):
        registry = SubscriptionRegistry(MagicMock())
        registry.open("a", [Filter()])
        registry.open("b", [Filter()])
        registry.close_all()
        assert len(registry) == 0
        assert list(registry) == []

    def test_matching_selects_by_filter(self, make_event):
        registry = SubscriptionRegistry(MagicMock())
        registry.open("issues", [Filter(kinds={1621})])
        registry.open("patches", [Filter(kinds={1617})])
        registry.open("all", [Filter()])
        ids = [s.id for s in registry.matching(make_event(1617))]
        assert ids == ["patches", "all"]
