"""
Session Identity

The dashboard does not authenticate anyone itself. It consumes a session from
an external identity provider through ``SessionProvider`` and only reads the
``{id, email, role}`` triple from it.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from pydantic import BaseModel, ConfigDict


class SessionUser(BaseModel):
    """Identity claims as issued by the provider. ``role`` is not trusted for authorization."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None
    role: str | None = None


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: SessionUser


class SessionProvider(ABC):
    @abstractmethod
    async def get_current_session(self) -> Session | None:
        """Return the caller's session, or None when nobody is signed in."""


class StaticSessionProvider(SessionProvider):
    """Holds one session for the whole process. Used by CLIs and tests."""

    def __init__(self, session: Session | None = None):
        self._session = session

    def sign_in(self, user_id: str, email: str | None = None, role: str | None = None) -> Session:
        self._session = Session(user=SessionUser(id=user_id, email=email, role=role))
        return self._session

    def sign_out(self) -> None:
        self._session = None

    async def get_current_session(self) -> Session | None:
        return self._session


_current_session: ContextVar[Session | None] = ContextVar("current_session", default=None)


class ContextSessionProvider(SessionProvider):
    """
    Per-request session bound by the transport layer.

    Usage:
        with sessions.bind(session):
            await actions.buildings.create(form)
    """

    @contextmanager
    def bind(self, session: Session | None) -> Iterator[None]:
        token = _current_session.set(session)
        try:
            yield
        finally:
            _current_session.reset(token)

    async def get_current_session(self) -> Session | None:
        return _current_session.get()
