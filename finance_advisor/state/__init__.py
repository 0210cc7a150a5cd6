"""Session state package: live values, routing, notifications and snapshots."""

from finance_advisor.state.live import LiveValue, Subscription
from finance_advisor.state.notifications import (
    StatusLevel,
    StatusMessage,
    StatusNotifier,
)
from finance_advisor.state.router import Screen, ViewRouter
from finance_advisor.state.snapshot import AppState

__all__ = [
    "AppState",
    "LiveValue",
    "Screen",
    "StatusLevel",
    "StatusMessage",
    "StatusNotifier",
    "Subscription",
    "ViewRouter",
]
