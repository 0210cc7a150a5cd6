"""Tests for live values, the view router, status notifications and AppState."""

import pytest

from finance_advisor.state import (
    AppState,
    LiveValue,
    Screen,
    StatusLevel,
    StatusNotifier,
    ViewRouter,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestLiveValue:
    """Tests for LiveValue and Subscription."""

    def test_holds_initial_value(self):
        live = LiveValue(())
        assert live.value == ()
        assert live.listener_count == 0

    def test_set_notifies_in_subscription_order(self):
        live = LiveValue(0)
        seen = []
        live.subscribe(lambda v: seen.append(("a", v)))
        live.subscribe(lambda v: seen.append(("b", v)))

        live.set(1)

        assert live.value == 1
        assert seen == [("a", 1), ("b", 1)]

    def test_emit_current(self):
        live = LiveValue("x")
        seen = []
        live.subscribe(seen.append, emit_current=True)
        assert seen == ["x"]

    def test_cancel_stops_notifications(self):
        live = LiveValue(0)
        seen = []
        subscription = live.subscribe(seen.append)

        subscription.cancel()
        live.set(5)

        assert seen == []
        assert subscription.active is False
        assert live.listener_count == 0

    def test_cancel_is_idempotent(self):
        live = LiveValue(0)
        first = live.subscribe(lambda v: None)
        live.subscribe(lambda v: None)

        first.cancel()
        first.cancel()

        assert live.listener_count == 1

    def test_failing_listener_does_not_block_others(self):
        live = LiveValue(0)
        seen = []

        def broken(value):
            raise RuntimeError("boom")

        live.subscribe(broken)
        live.subscribe(seen.append)
        live.set(3)

        assert seen == [3]


class TestViewRouter:
    """Tests for screen selection."""

    def test_starts_on_dashboard(self):
        assert ViewRouter().current == Screen.DASHBOARD

    @pytest.mark.parametrize("screen", list(Screen))
    def test_navigate_to_any_screen(self, screen):
        router = ViewRouter()
        assert router.navigate(screen) == screen
        assert router.is_on(screen)

    def test_navigate_accepts_screen_value(self):
        router = ViewRouter()
        router.navigate("budgetPlanner")
        assert router.current == Screen.BUDGET_PLANNER

    def test_cancel_returns_to_dashboard(self):
        router = ViewRouter()
        router.navigate(Screen.USER_PROFILE)
        assert router.cancel() == Screen.DASHBOARD

    def test_complete_returns_to_dashboard(self):
        router = ViewRouter()
        router.navigate(Screen.ADD_TRANSACTION)
        router.complete()
        assert router.is_on(Screen.DASHBOARD)

    def test_screen_values(self):
        assert [s.value for s in Screen] == [
            "dashboard", "addTransaction", "budgetPlanner", "userProfile",
        ]


class TestStatusNotifier:
    """Tests for short-lived status messages."""

    def test_nothing_shown_initially(self):
        assert StatusNotifier().current() is None

    def test_message_expires(self):
        clock = FakeClock()
        notifier = StatusNotifier(display_seconds=3.0, clock=clock)

        notifier.success("Saved")
        clock.advance(2.5)
        assert notifier.current().text == "Saved"
        assert notifier.remaining_seconds() == pytest.approx(0.5)

        clock.advance(0.5)
        assert notifier.current() is None
        assert notifier.remaining_seconds() == 0.0

    def test_new_message_replaces_and_resets_deadline(self):
        clock = FakeClock()
        notifier = StatusNotifier(display_seconds=3.0, clock=clock)

        notifier.success("First")
        clock.advance(2.0)
        notifier.error("Second")
        clock.advance(2.0)

        message = notifier.current()
        assert message.text == "Second"
        assert message.level == StatusLevel.ERROR

    def test_dismiss(self):
        notifier = StatusNotifier()
        notifier.show("Hello")
        notifier.dismiss()
        assert notifier.current() is None

    def test_default_level_is_info(self):
        assert StatusNotifier().show("Hi").level == StatusLevel.INFO


class TestAppState:

    def test_not_ready_without_identity(self):
        state = AppState()
        assert state.is_ready is False
        assert state.screen == Screen.DASHBOARD
        assert state.summary.total_income == 0

    def test_categories_include_custom(self):
        state = AppState(identity="u1", custom_categories=("Pets",))
        assert state.is_ready is True
        assert state.categories.expense[-1] == "Pets"
