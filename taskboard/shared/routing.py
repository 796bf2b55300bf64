"""Client-side routes and the authentication gate in front of them."""

import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple
from urllib.parse import parse_qsl, urlsplit

from taskboard.domains.auth.session import AuthSession

logger = logging.getLogger(__name__)

ENTRY_PATH = "/"
HOME_PATH = "/dashboard"
MAX_REDIRECTS = 5


class RouteAccess(str, Enum):
    ANONYMOUS_ONLY = "anonymous-only"
    PROTECTED = "protected"


class Route:
    """A named path pattern such as ``/tasks/edit/{id}``."""

    def __init__(self, name: str, pattern: str, access: RouteAccess = RouteAccess.PROTECTED):
        self.name = name
        self.pattern = pattern
        self.access = access
        regex = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", pattern)
        self._regex = re.compile(f"^{regex}$")

    def match(self, path: str) -> dict[str, str] | None:
        m = self._regex.match(path)
        return m.groupdict() if m else None

    def __repr__(self) -> str:
        return f"Route({self.name!r}, {self.pattern!r})"


# Static segments come before parameterised ones so /projects/new is not an id
ROUTES: list[Route] = [
    Route("login", "/", RouteAccess.ANONYMOUS_ONLY),
    Route("register", "/register", RouteAccess.ANONYMOUS_ONLY),
    Route("dashboard", "/dashboard"),
    Route("project_list", "/projects"),
    Route("project_new", "/projects/new"),
    Route("project_edit", "/projects/edit/{id}"),
    Route("project_detail", "/projects/{id}"),
    Route("task_list", "/tasks"),
    Route("task_new", "/tasks/new"),
    Route("task_edit", "/tasks/edit/{id}"),
    Route("task_detail", "/tasks/{id}"),
]


class Decision(str, Enum):
    PENDING = "pending"
    ALLOW = "allow"
    REDIRECT = "redirect"


class RouteDecision(NamedTuple):
    decision: Decision
    path: str
    route: Route | None = None
    params: dict[str, str] | None = None
    query: dict[str, str] | None = None
    redirect_to: str | None = None


def _normalize(path: str) -> tuple[str, dict[str, str]]:
    parts = urlsplit(path)
    clean = parts.path or "/"
    if len(clean) > 1:
        clean = clean.rstrip("/") or "/"
    return clean, dict(parse_qsl(parts.query))


class Router:
    """
    Decides which screen a path leads to, given the authentication state.

    While the session is still loading no decision is made. Afterwards,
    protected routes need an authenticated session (otherwise the user is sent
    to the entry page, and the attempted destination is not remembered), the
    login and register pages send authenticated users home, and unknown paths
    go to the entry page.
    """

    def __init__(self, session: AuthSession, routes: list[Route] | None = None):
        self.session = session
        self.routes = routes if routes is not None else ROUTES
        self.location: str | None = None
        self.current: RouteDecision | None = None
        self.state: dict[str, Any] | None = None
        self.history: list[str] = []
        self._pending: tuple[str, dict[str, Any] | None] | None = None
        self._listeners: list[Callable[[RouteDecision], None]] = []
        session.subscribe(self._on_session_change)

    def match(self, path: str) -> tuple[Route | None, dict[str, str]]:
        for route in self.routes:
            params = route.match(path)
            if params is not None:
                return route, params
        return None, {}

    def resolve(self, path: str) -> RouteDecision:
        clean, query = _normalize(path)

        if self.session.loading:
            return RouteDecision(Decision.PENDING, clean, params={}, query=query)

        route, params = self.match(clean)
        if route is None:
            return RouteDecision(
                Decision.REDIRECT, clean, params={}, query=query, redirect_to=ENTRY_PATH
            )

        if route.access == RouteAccess.PROTECTED and not self.session.is_authenticated:
            return RouteDecision(
                Decision.REDIRECT, clean, route, params, query, redirect_to=ENTRY_PATH
            )
        if route.access == RouteAccess.ANONYMOUS_ONLY and self.session.is_authenticated:
            return RouteDecision(
                Decision.REDIRECT, clean, route, params, query, redirect_to=HOME_PATH
            )

        return RouteDecision(Decision.ALLOW, clean, route, params, query)

    def navigate(self, path: str, state: dict[str, Any] | None = None) -> RouteDecision:
        """Go to ``path``, following redirects. Redirects drop navigation state."""
        decision = self.resolve(path)
        hops = 0
        while decision.decision == Decision.REDIRECT and hops < MAX_REDIRECTS:
            logger.debug(f"Redirecting {decision.path} -> {decision.redirect_to}")
            decision = self.resolve(decision.redirect_to)
            state = None
            hops += 1

        if decision.decision == Decision.PENDING:
            self._pending = (path, state)
            return decision

        self._pending = None
        if self._is_current(decision, state):
            return decision

        self.location = decision.path
        self.current = decision
        self.state = state
        self.history.append(decision.path)
        for listener in list(self._listeners):
            listener(decision)
        return decision

    def _is_current(self, decision: RouteDecision, state: dict[str, Any] | None) -> bool:
        """Whether ``decision`` is where the router already is."""
        if self.current is None:
            return False
        return (decision.path, decision.query, state) == (
            self.current.path,
            self.current.query,
            self.state,
        )

    def subscribe(self, listener: Callable[[RouteDecision], None]) -> Callable[[], None]:
        """Call ``listener`` whenever the location changes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _on_session_change(self, session: AuthSession) -> None:
        if session.loading:
            return
        if self._pending is not None:
            path, state = self._pending
            self.navigate(path, state)
        elif self.location is not None and self.resolve(self.location).decision != Decision.ALLOW:
            self.navigate(self.location)
