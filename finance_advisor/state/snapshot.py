"""
Application state snapshot

Everything a screen needs to render, captured at one moment.
The front end receives an AppState and never reaches into the
session or the store directly.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_advisor.models.category import CategoryRegistry
from finance_advisor.models.finance import Summary, Transaction
from finance_advisor.state.notifications import StatusMessage
from finance_advisor.state.router import Screen


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    # None until the identity provider has answered
    identity: Optional[str] = None
    screen: Screen = Screen.DASHBOARD
    dark_mode: bool = False

    transactions: tuple[Transaction, ...] = ()
    budgets: dict[str, Decimal] = Field(default_factory=dict)
    custom_categories: tuple[str, ...] = ()
    user_name: str = ""

    summary: Summary = Field(default_factory=Summary)
    advice: tuple[str, ...] = ()
    status: Optional[StatusMessage] = None

    @property
    def is_ready(self) -> bool:
        """False while the identity is still pending (render a loading state)."""
        return self.identity is not None

    @property
    def categories(self) -> CategoryRegistry:
        return CategoryRegistry(self.custom_categories)
