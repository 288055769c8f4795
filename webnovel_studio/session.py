"""Observable wrapper around the Flask-Login session lifecycle.

Flask-Login announces logins and logouts through blinker signals. The
:class:`SessionObserver` listens to those signals for a single application,
keeps the identity that is currently signed in and forwards every change to
its subscribers. Subscribers get back an explicit ``unsubscribe`` callable,
and :meth:`SessionObserver.close` detaches the observer from the signals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from flask import Flask
from flask_login import user_logged_in, user_logged_out

LOGGER = logging.getLogger(__name__)

EXTENSION_KEY = "session_observer"


@dataclass(frozen=True)
class SessionIdentity:
    user_id: int
    email: str


SessionCallback = Callable[[str, Optional[SessionIdentity]], None]


class SessionObserver:
    def __init__(self, app: Flask):
        self.app = app
        self.current: Optional[SessionIdentity] = None
        self._subscribers: List[SessionCallback] = []
        user_logged_in.connect(self._on_logged_in, sender=app)
        user_logged_out.connect(self._on_logged_out, sender=app)

    def subscribe(self, callback: SessionCallback) -> Callable[[], None]:
        """Register ``callback`` and return the function that removes it again."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def close(self) -> None:
        user_logged_in.disconnect(self._on_logged_in, sender=self.app)
        user_logged_out.disconnect(self._on_logged_out, sender=self.app)
        self._subscribers.clear()

    def _on_logged_in(self, sender: Any, user: Any = None, **_: Any) -> None:
        identity = None
        if user is not None:
            identity = SessionIdentity(user_id=user.id, email=user.email)
        self._publish("SIGNED_IN", identity)

    def _on_logged_out(self, sender: Any, user: Any = None, **_: Any) -> None:
        self._publish("SIGNED_OUT", None)

    def _publish(self, event: str, identity: Optional[SessionIdentity]) -> None:
        self.current = identity
        for callback in list(self._subscribers):
            callback(event, identity)


def init_session_observer(app: Flask) -> SessionObserver:
    observer = SessionObserver(app)
    app.extensions[EXTENSION_KEY] = observer

    def log_session_change(event: str, identity: Optional[SessionIdentity]) -> None:
        if identity is None:
            app.logger.info("Session change: %s", event)
        else:
            app.logger.info("Session change: %s (user %s)", event, identity.user_id)

    observer.subscribe(log_session_change)
    return observer


def get_session_observer(app: Flask) -> SessionObserver:
    return app.extensions[EXTENSION_KEY]
