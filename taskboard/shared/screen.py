"""Screen lifecycle shared by every view."""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from taskboard.exceptions.base import MissingRouteParameterError
from taskboard.shared.optimistic import ItemT, apply_optimistic_removal

logger = logging.getLogger(__name__)

Navigate = Callable[..., Any]
ResultT = TypeVar("ResultT")


def _no_navigation(path: str, state: dict[str, Any] | None = None) -> None:
    logger.debug(f"Navigation to {path} ignored: screen has no router")


def parse_id(value: Any, name: str = "id") -> int:
    """Turn a route parameter into a record id."""
    if value is None or value == "":
        raise MissingRouteParameterError(name, value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MissingRouteParameterError(name, value) from None


class Screen(Generic[ResultT]):
    """
    Base class for a view's state.

    ``mount()`` runs :meth:`load` once with ``loading`` raised, then either
    hands the result to :meth:`apply` or records :attr:`load_error_message`.
    ``loading`` is lowered exactly once per load, whatever the outcome. A
    load that finishes after :meth:`unmount` is dropped.
    """

    load_error_message = "Failed to load data"

    def __init__(self, navigate: Navigate | None = None):
        self.navigate: Navigate = navigate or _no_navigation
        self.loading = self.should_load
        self.error: str | None = None
        self.mounted = False
        self._listeners: list[Callable[["Screen"], None]] = []

    @property
    def should_load(self) -> bool:
        return True

    def subscribe(self, listener: Callable[["Screen"], None]) -> Callable[[], None]:
        """Call ``listener`` after every state change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self.mounted:
            return
        for listener in list(self._listeners):
            listener(self)

    async def mount(self) -> None:
        self.mounted = True
        if self.should_load:
            await self.refresh()
        else:
            self.loading = False
            self._notify()

    def unmount(self) -> None:
        self.mounted = False

    async def refresh(self) -> None:
        self.loading = True
        self._notify()
        try:
            result = await self.load()
        except Exception as e:
            logger.error(f"{type(self).__name__}: {self.load_error_message}: {str(e)}")
            if self.mounted:
                self.error = self.load_error_message
        else:
            if self.mounted:
                self.apply(result)
                self.error = None
        finally:
            if self.mounted:
                self.loading = False
                self._notify()

    async def load(self) -> ResultT:
        raise NotImplementedError

    def apply(self, result: ResultT) -> None:
        raise NotImplementedError


class ListScreen(Screen[ResultT], Generic[ResultT, ItemT]):
    """A screen showing a list of records that can be deleted after confirmation."""

    delete_error_message = "Failed to delete"

    def __init__(self, navigate: Navigate | None = None):
        super().__init__(navigate)
        self.items: list[ItemT] = []
        self.pending_delete: ItemT | None = None

    @property
    def delete_dialog_open(self) -> bool:
        return self.pending_delete is not None

    def request_delete(self, item: ItemT) -> None:
        self.pending_delete = item
        self._notify()

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self._notify()

    async def confirm_delete(self) -> bool:
        """Delete the record awaiting confirmation.

        The record leaves :attr:`items` before the request is sent. A failed
        request sets :attr:`error` but does not bring the record back.
        """
        item = self.pending_delete
        if item is None:
            return False

        self.pending_delete = None
        self.items = apply_optimistic_removal(self.items, item.id)
        self._notify()

        try:
            await self.delete_item(item.id)
        except Exception as e:
            logger.error(f"{type(self).__name__}: {self.delete_error_message}: {str(e)}")
            if self.mounted:
                self.error = self.delete_error_message
                self._notify()
            return False
        return True

    async def delete_item(self, item_id: int) -> Any:
        raise NotImplementedError
