"""Session lifecycle use case: login, logout, token validity and refresh."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from consultores_client.application.dto.token import SessionSnapshot, TokenGrant
from consultores_client.application.ports.session_store import SessionStorePort
from consultores_client.application.ports.token_service import (
    TokenIssuerPort,
    TokenRefresherPort,
)
from consultores_client.domain.session import SAFETY_MARGIN_MS, Session, SessionState
from consultores_client.errors import NotAuthenticatedError, RefreshError

logger = logging.getLogger("consultores_client.session")

SessionListener = Callable[[SessionSnapshot], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionManager:
    """Owns the single authentication session and gates access tokens.

    The stored session is read once at construction. Every later mutation
    replaces the in-memory session and writes it through to the store before
    listeners are notified. Concurrent ``get_valid_token`` callers that find
    the session stale share one refresh exchange.
    """

    def __init__(
        self,
        *,
        store: SessionStorePort,
        issuer: TokenIssuerPort,
        refresher: TokenRefresherPort,
        clock: Callable[[], int] = _now_ms,
        safety_margin_ms: int = SAFETY_MARGIN_MS,
    ) -> None:
        if safety_margin_ms < 0:
            raise ValueError("safety_margin_ms must be non-negative")
        self._store = store
        self._issuer = issuer
        self._refresher = refresher
        self._clock = clock
        self._safety_margin_ms = safety_margin_ms
        self._listeners: list[SessionListener] = []
        self._refresh_task: asyncio.Task[Session] | None = None
        self._refresh_origin: Session | None = None
        self._session: Session | None = store.load()
        if self._session is not None:
            logger.info(
                "session restored from storage",
                extra={"data": self._describe(self._session)},
            )

    # ------------------------------------------------------------------
    # observable state

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def current_user_identifier(self) -> str | None:
        session = self._session
        return session.identifier if session is not None else None

    @property
    def state(self) -> SessionState:
        session = self._session
        if session is None:
            return SessionState.UNAUTHENTICATED
        return session.state(self._clock(), self._safety_margin_ms)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_authenticated=self.is_authenticated,
            user_identifier=self.current_user_identifier,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for post-mutation snapshots and return an unsubscribe hook."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # operations

    async def login(self, identifier: str, secret: str) -> None:
        """Exchange credentials for a new session, replacing any prior one.

        Raises:
            AuthenticationError: credentials rejected or identity service unreachable.
        """
        grant = await self._issuer.sign_in(identifier, secret)
        session = Session.issue(
            identifier=grant.identifier or identifier.strip(),
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            lifetime_seconds=grant.lifetime_seconds,
            issued_at_ms=self._clock(),
        )
        self._replace(session)
        logger.info("session established", extra={"data": self._describe(session)})

    def logout(self) -> None:
        """Discard the session in memory and in storage."""
        if self._session is None:
            return
        identifier = self._session.identifier
        self._replace(None)
        logger.info("session cleared", extra={"data": {"identifier": identifier}})

    async def get_valid_token(self) -> str:
        """Return an access token valid beyond the safety margin, refreshing if needed.

        Raises:
            NotAuthenticatedError: no session exists.
            RefreshError: the refresh exchange failed; the session is left in place.
        """
        session = self._session
        if session is None:
            raise NotAuthenticatedError("no authenticated session")
        if session.is_fresh(self._clock(), self._safety_margin_ms):
            return session.access_token
        refreshed = await self._refresh_single_flight(session)
        return refreshed.access_token

    async def ensure_session_validity(self) -> None:
        """Refresh an already-expired restored session once, logging out on failure."""
        session = self._session
        if session is None or not session.is_expired(self._clock()):
            return
        logger.info(
            "restored session expired, refreshing",
            extra={"data": self._describe(session)},
        )
        try:
            await self._refresh_single_flight(session)
        except NotAuthenticatedError:
            return
        except RefreshError as exc:
            logger.warning(
                "startup refresh failed, forcing logout",
                extra={"data": {"identifier": session.identifier, "error": str(exc)}},
            )
            self.logout()

    # ------------------------------------------------------------------
    # helpers

    async def _refresh_single_flight(self, session: Session) -> Session:
        task = self._refresh_task
        # Only join a refresh started from this same session.
        if task is None or self._refresh_origin is not session:
            task = asyncio.ensure_future(self._refresh(session))
            self._refresh_task = task
            self._refresh_origin = session
            task.add_done_callback(self._on_refresh_done)
        else:
            logger.debug("joining in-flight session refresh")
        return await asyncio.shield(task)

    def _on_refresh_done(self, task: asyncio.Task[Session]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
            self._refresh_origin = None
        if not task.cancelled():
            # Mark the outcome retrieved even when every waiter was cancelled.
            task.exception()

    async def _refresh(self, session: Session) -> Session:
        grant: TokenGrant = await self._refresher.refresh(session.refresh_token)
        refreshed = session.renew(
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            lifetime_seconds=grant.lifetime_seconds,
            issued_at_ms=self._clock(),
        )
        current = self._session
        if current is not session:
            logger.info(
                "discarding refresh result for superseded session",
                extra={"data": {"identifier": session.identifier}},
            )
            if current is None:
                raise NotAuthenticatedError("session ended while refreshing")
            return current
        self._replace(refreshed)
        logger.info("session refreshed", extra={"data": self._describe(refreshed)})
        return refreshed

    def _replace(self, session: Session | None) -> None:
        self._session = session
        self._store.save(session)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("session listener failed")

    def _describe(self, session: Session) -> dict[str, object]:
        return {
            "identifier": session.identifier,
            "expires_at": session.expires_at,
            "expires_in_ms": session.expires_at - self._clock(),
        }


__all__ = ["SessionListener", "SessionManager"]
