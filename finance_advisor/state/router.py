"""
View Router

Holds which screen is active. The front end renders whatever
`current` says; the session moves it back to the dashboard after
a successful add-transaction, update-budgets or update-profile intent.
"""

from enum import Enum


class Screen(str, Enum):
    """Screens the application can show."""
    DASHBOARD = "dashboard"
    ADD_TRANSACTION = "addTransaction"
    BUDGET_PLANNER = "budgetPlanner"
    USER_PROFILE = "userProfile"


class ViewRouter:
    """Active screen selector. Starts on the dashboard and never terminates."""

    def __init__(self, initial: Screen = Screen.DASHBOARD):
        self._current = initial

    @property
    def current(self) -> Screen:
        return self._current

    def navigate(self, screen: Screen) -> Screen:
        self._current = Screen(screen)
        return self._current

    def cancel(self) -> Screen:
        """Leave the current form without saving."""
        return self.navigate(Screen.DASHBOARD)

    def complete(self) -> Screen:
        """An intent finished successfully."""
        return self.navigate(Screen.DASHBOARD)

    def is_on(self, screen: Screen) -> bool:
        return self._current == screen
