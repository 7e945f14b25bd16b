"""Session provider: who is signed in, and notifications when that changes."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class AuthEventKind(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"


@dataclass(frozen=True)
class AuthEvent:
    """Auth state change; ``user_id`` is None after sign-out."""

    kind: AuthEventKind
    user_id: Optional[str]


AuthListener = Callable[[AuthEvent], None]


class SessionProvider(ABC):
    """Source of the current user identifier."""

    @abstractmethod
    def get_current_user_id(self) -> Optional[str]:
        """Return the signed-in user's id, or None."""
        pass

    @abstractmethod
    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register for auth state changes. Returns a function that unsubscribes."""
        pass


class LocalSessionProvider(SessionProvider):
    """In-process session provider.

    Listeners are called synchronously, in subscription order.
    """

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id
        self._listeners: list[AuthListener] = []

    def get_current_user_id(self) -> Optional[str]:
        return self._user_id

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id is required to sign in")
        self._user_id = user_id
        logger.info("Signed in as %s", user_id)
        self._emit(AuthEvent(AuthEventKind.SIGNED_IN, user_id))

    def sign_out(self) -> None:
        self._user_id = None
        logger.info("Signed out")
        self._emit(AuthEvent(AuthEventKind.SIGNED_OUT, None))

    def refresh(self) -> None:
        if self._user_id is None:
            return
        self._emit(AuthEvent(AuthEventKind.TOKEN_REFRESHED, self._user_id))

    def _emit(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
