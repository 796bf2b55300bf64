"""Taskboard - Main Application Module.

This module wires storage, the HTTP client, the resource services, the
authentication session and the router into one application object, and
provides a small command line front end over the screens.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from urllib.parse import urlencode

import httpx

from taskboard.core.config import Settings, get_config_summary, settings as default_settings
from taskboard.core.http import ApiClient
from taskboard.core.logging import configure_logging
from taskboard.core.storage import FileStorage, KeyValueStorage, TokenStore
from taskboard.domains.auth.screens import LoginScreen, RegisterScreen
from taskboard.domains.auth.service import AuthService
from taskboard.domains.auth.session import AuthSession
from taskboard.domains.dashboard.screen import DashboardScreen, utcnow
from taskboard.domains.project.screens import (
    ProjectDetailScreen,
    ProjectFormScreen,
    ProjectListScreen,
)
from taskboard.domains.project.service import ProjectService
from taskboard.domains.task.screens import (
    TaskDetailScreen,
    TaskFormScreen,
    TaskListScreen,
    filter_from_query,
)
from taskboard.domains.task.service import TaskService
from taskboard.schemas.task import TaskStatus
from taskboard.shared.routing import Decision, RouteDecision, Router
from taskboard.shared.screen import Screen

logger = logging.getLogger(__name__)


class TaskboardApp:
    """
    The client application: one session, one router, one active screen.

    :ivar settings: Application settings.
    :ivar session: Authentication state shared with every screen.
    :ivar router: Route guard and current location.
    :ivar screen: The mounted screen, if any.
    """

    def __init__(
        self,
        settings: Settings,
        storage: KeyValueStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.settings = settings
        self.clock = clock
        self.storage = storage if storage is not None else FileStorage(settings.storage_path)
        self.token_store = TokenStore(self.storage, settings.token_storage_key)
        self.client = ApiClient(
            settings.api_base_url,
            self.token_store,
            timeout=settings.request_timeout,
            transport=transport,
        )
        self.auth_service = AuthService(self.client, self.token_store)
        self.project_service = ProjectService(self.client)
        self.task_service = TaskService(self.client)
        self.session = AuthSession(self.auth_service)
        self.router = Router(self.session)
        self.screen: Screen | None = None

    def build_screen(self, decision: RouteDecision) -> Screen:
        """Instantiate the screen for an allowed route."""
        navigate = self.router.navigate
        params = decision.params
        query = decision.query
        builders: dict[str, Callable[[], Screen]] = {
            "login": lambda: LoginScreen(self.session, navigate, self.router.state),
            "register": lambda: RegisterScreen(self.session, navigate),
            "dashboard": lambda: DashboardScreen(
                self.project_service,
                self.task_service,
                navigate,
                clock=self.clock,
                due_soon_days=self.settings.due_soon_days,
                recent_projects_limit=self.settings.recent_projects_limit,
            ),
            "project_list": lambda: ProjectListScreen(self.project_service, navigate),
            "project_new": lambda: ProjectFormScreen(self.project_service, navigate=navigate),
            "project_edit": lambda: ProjectFormScreen(
                self.project_service, is_edit=True, project_id=params.get("id"), navigate=navigate
            ),
            "project_detail": lambda: ProjectDetailScreen(
                self.project_service, self.task_service, params.get("id"), navigate
            ),
            "task_list": lambda: TaskListScreen(
                self.task_service,
                self.project_service,
                navigate,
                filters=filter_from_query(query),
            ),
            "task_new": lambda: TaskFormScreen(
                self.task_service,
                self.project_service,
                initial_project_id=query.get("project_id"),
                navigate=navigate,
            ),
            "task_edit": lambda: TaskFormScreen(
                self.task_service,
                self.project_service,
                is_edit=True,
                task_id=params.get("id"),
                navigate=navigate,
            ),
            "task_detail": lambda: TaskDetailScreen(
                self.task_service, self.project_service, params.get("id"), navigate
            ),
        }
        return builders[decision.route.name]()

    async def open_screen(self, path: str, state: dict | None = None) -> Screen | None:
        """Navigate to ``path`` and mount the screen the router lands on.

        Returns None while the session is still being restored.
        """
        decision = self.router.navigate(path, state)
        if decision.decision != Decision.ALLOW:
            return None

        if self.screen is not None:
            self.screen.unmount()
        self.screen = self.build_screen(decision)
        await self.screen.mount()
        return self.screen


@asynccontextmanager
async def lifespan(app: TaskboardApp) -> AsyncIterator[TaskboardApp]:
    """Restore the session on start-up and release the HTTP client on exit."""
    logger.info(f"🚀 Starting {app.settings.app_name} v{app.settings.version}")
    logger.info(f"Configuration: {get_config_summary(app.settings)}")
    try:
        await app.session.restore()
        yield app
    finally:
        await app.client.aclose()
        logger.info(f"🛑 {app.settings.app_name} closed")


def create_app(settings: Settings | None = None, **kwargs) -> TaskboardApp:
    """Create and configure the application."""
    return TaskboardApp(settings or default_settings, **kwargs)


# ===== Command line front end =====


def render_dashboard(screen: DashboardScreen) -> str:
    lines = [screen.summary, ""]
    counts = screen.status_counts
    lines.append(
        f"To Do: {counts[TaskStatus.TODO]}  "
        f"In Progress: {counts[TaskStatus.IN_PROGRESS]}  "
        f"Done: {counts[TaskStatus.DONE]}"
    )
    lines.append("")
    lines.append("Recent Projects")
    if screen.recent_projects:
        lines.extend(f"  #{p.id} {p.name}" for p in screen.recent_projects)
    else:
        lines.append("  No projects yet")
    lines.append("")
    lines.append("Tasks Due Soon")
    if screen.tasks_due_soon:
        lines.extend(
            f"  #{t.id} {t.title} (due {t.due_date:%Y-%m-%d})" for t in screen.tasks_due_soon
        )
    else:
        lines.append("  No tasks due soon")
    return "\n".join(lines)


def render_projects(screen: ProjectListScreen) -> str:
    if not screen.projects:
        return "No projects found"
    return "\n".join(
        f"#{p.id} {p.name} - {p.description or 'No description'}" for p in screen.projects
    )


def render_tasks(screen: TaskListScreen) -> str:
    if not screen.tasks:
        return "No tasks found"
    lines = []
    for t in screen.tasks:
        line = f"#{t.id} [{t.status.value}] [{t.priority.value}] {t.title}"
        if t.project_id is not None:
            line += f" ({screen.project_name(t.project_id)})"
        if t.due_date is not None:
            line += f" due {t.due_date:%Y-%m-%d}"
        lines.append(line)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskboard", description="Command line client for the task management API"
    )
    parser.add_argument("--api-url", help="Override TASKBOARD_API_BASE_URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and store the session token")
    login.add_argument("email")
    login.add_argument("--password", help="Prompted for when omitted")

    register = sub.add_parser("register", help="Create an account")
    register.add_argument("email")
    register.add_argument("full_name")
    register.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the stored session token")
    sub.add_parser("whoami", help="Show the signed-in user")
    sub.add_parser("dashboard", help="Show the dashboard")
    sub.add_parser("projects", help="List projects")

    tasks = sub.add_parser("tasks", help="List tasks")
    tasks.add_argument("--status", choices=[s.value for s in TaskStatus])
    tasks.add_argument("--priority", choices=["LOW", "MEDIUM", "HIGH"])
    tasks.add_argument("--project", type=int, dest="project_id")
    return parser


async def run_command(app: TaskboardApp, args: argparse.Namespace) -> int:
    if args.command == "logout":
        app.session.logout()
        print("Signed out")
        return 0

    if args.command in ("login", "register"):
        password = args.password or getpass.getpass("Password: ")
        if args.command == "login":
            screen = await app.open_screen("/")
            if not isinstance(screen, LoginScreen):
                print("Already signed in")
                return 0
            screen.email, screen.password = args.email, password
            if not await screen.submit():
                print(screen.error, file=sys.stderr)
                return 1
            print(f"Signed in as {app.session.user.email}")
            return 0
        screen = await app.open_screen("/register")
        if not isinstance(screen, RegisterScreen):
            print("Already signed in")
            return 0
        screen.email, screen.password, screen.full_name = args.email, password, args.full_name
        if not await screen.submit():
            print(screen.error, file=sys.stderr)
            return 1
        print("Registration successful, you can now sign in")
        return 0

    if not app.session.is_authenticated:
        print("Not signed in. Run `taskboard login <email>` first.", file=sys.stderr)
        return 1

    if args.command == "whoami":
        user = app.session.user
        print(f"{user.full_name or ''} <{user.email}>".strip())
        return 0

    path = {"dashboard": "/dashboard", "projects": "/projects", "tasks": "/tasks"}[args.command]
    if args.command == "tasks":
        query = {"status": args.status, "priority": args.priority, "project_id": args.project_id}
        query = {k: v for k, v in query.items() if v is not None}
        if query:
            path = f"{path}?{urlencode(query)}"

    screen = await app.open_screen(path)
    if screen.error:
        print(screen.error, file=sys.stderr)
        return 1

    renderers = {
        "dashboard": render_dashboard,
        "projects": render_projects,
        "tasks": render_tasks,
    }
    print(renderers[args.command](screen))
    return 0


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    async with lifespan(create_app(settings)) as app:
        return await run_command(app, args)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``taskboard`` command."""
    args = build_parser().parse_args(argv)
    overrides = {}
    if args.api_url:
        overrides["api_base_url"] = args.api_url
    if args.verbose:
        overrides["debug"] = True
    settings = Settings(**overrides) if overrides else default_settings
    configure_logging(settings)
    return asyncio.run(_main(args, settings))


if __name__ == "__main__":
    sys.exit(main())
