"""
Anonymous Identity Provider

The session needs a stable opaque identity before it can read or
write anything. "No identity yet" is a distinct state from "identity
present but nothing stored": the front end shows a loading screen
for the former.

AnonymousIdentityProvider issues a random token on first sign-in and
keeps it for the life of the provider. Pass `identity=` to resume a
token from an earlier run.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import uuid4

import structlog

from finance_advisor.state.live import LiveValue


logger = structlog.get_logger(__name__)


class IdentityError(Exception):
    """The provider could not establish an identity."""
    pass


class IdentityProviderInterface(ABC):
    """Source of the current identity."""

    @abstractmethod
    async def sign_in(self) -> str:
        """
        Establish an identity (or return the existing one).

        Raises:
            IdentityError: sign-in failed
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    @property
    @abstractmethod
    def current_identity(self) -> Optional[str]:
        pass

    @abstractmethod
    def watch_identity(self) -> LiveValue[Optional[str]]:
        """Live current identity; None while signed out."""
        pass


class AnonymousIdentityProvider(IdentityProviderInterface):
    """Anonymous sign-in backed by a random token."""

    def __init__(self, identity: Optional[str] = None):
        self._resume = identity
        self._live: LiveValue[Optional[str]] = LiveValue(None)

    async def sign_in(self) -> str:
        if self._live.value is None:
            identity = self._resume or uuid4().hex
            logger.info("signed_in_anonymously", identity=identity)
            self._live.set(identity)
        return self._live.value

    async def sign_out(self) -> None:
        if self._live.value is not None:
            logger.info("signed_out", identity=self._live.value)
            self._resume = None
            self._live.set(None)

    @property
    def current_identity(self) -> Optional[str]:
        return self._live.value

    def watch_identity(self) -> LiveValue[Optional[str]]:
        return self._live
