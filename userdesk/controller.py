"""
User list controller.

Owns the cached user collection, the current page and the add/edit session,
and drives every read and write against the directory service. Pagination
is computed locally by slicing the cached collection; every successful round
trip replaces the cache with the server's collection wholesale.

Directory failures never escape the controller: they are logged, reported
as a failure notification and leave the cache at its last known-good value.
Concurrent round trips are not serialized, so whichever response arrives
last wins.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from userdesk.api.directory import DirectoryClient
from userdesk.exceptions import DirectoryServiceError
from userdesk.models import WIRE_FIELDS, UserRecord
from userdesk.notifications import NotificationCenter
from userdesk.utils.config import Config

logger = logging.getLogger(__name__)


class EditIntent(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass
class ControllerState:
    users: List[UserRecord] = field(default_factory=list)
    page: int = 1
    page_size: int = 20
    draft: Optional[UserRecord] = None
    intent: Optional[EditIntent] = None
    # True once any round trip has delivered a collection
    loaded: bool = False

    @property
    def is_editing(self) -> bool:
        return self.draft is not None


@dataclass(frozen=True)
class PageView:
    rows: List[UserRecord]
    page: int
    total_pages: int
    total: int
    first_index: int
    last_index: int


@dataclass(frozen=True)
class Navigation:
    first: bool
    previous: bool
    next: bool
    last: bool


def count_pages(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return (total + page_size - 1) // page_size


def compute_visible_page(state: ControllerState) -> PageView:
    """
    Slice the cached collection down to the current page.

    Rows are ``users[(page-1)*page_size : page*page_size]``; an out-of-range
    page simply yields no rows. ``first_index``/``last_index`` are 1-based
    positions of the rows shown (both 0 when nothing is shown).
    """
    total = len(state.users)
    start = (state.page - 1) * state.page_size
    end = state.page * state.page_size
    rows = state.users[start:end] if start >= 0 else []
    first_index = start + 1 if rows else 0
    last_index = start + len(rows) if rows else 0
    return PageView(
        rows=rows,
        page=state.page,
        total_pages=count_pages(total, state.page_size),
        total=total,
        first_index=first_index,
        last_index=last_index,
    )


def navigation(state: ControllerState) -> Navigation:
    """Which pagination affordances are enabled: first/previous off at page 1, next off at or past the last page, last off on it."""
    pages = count_pages(len(state.users), state.page_size)
    at_first = state.page <= 1
    # a page left past the end by a delete keeps Last enabled so it can jump back
    no_next = state.page >= pages
    on_last = pages == 0 or state.page == pages
    return Navigation(first=not at_first, previous=not at_first, next=not no_next, last=not on_last)


class UserListController:
    def __init__(self, client: DirectoryClient, notifications: Optional[NotificationCenter] = None,
                 page_size: Optional[int] = None, wait_for_save: Optional[bool] = None,
                 clamp_page: Optional[bool] = None):
        self.client = client
        self.notifications = notifications or NotificationCenter()
        self.state = ControllerState(page_size=page_size or Config.PAGE_SIZE)
        self.wait_for_save = Config.WAIT_FOR_SAVE if wait_for_save is None else wait_for_save
        self.clamp_page = Config.CLAMP_PAGE if clamp_page is None else clamp_page
        # Bumped on every begin_create/begin_edit so a late save response
        # never closes a dialog opened after it was sent
        self.edit_session = 0
        # monotonic time the current add/edit session began
        self.edit_started_at: Optional[float] = None

    @classmethod
    def from_config(cls) -> "UserListController":
        return cls(DirectoryClient.from_config())

    # Pagination

    def visible_page(self) -> PageView:
        return compute_visible_page(self.state)

    def navigation(self) -> Navigation:
        return navigation(self.state)

    @property
    def total_pages(self) -> int:
        return count_pages(len(self.state.users), self.state.page_size)

    def go_to_page(self, page: int) -> bool:
        """Move to ``page``; out-of-range requests leave the current page alone."""
        if page < 1 or page > self.total_pages:
            logger.debug(f"Ignoring request for page {page} (valid range 1-{self.total_pages})")
            return False
        self.state.page = page
        return True

    def first_page(self) -> bool:
        if not self.navigation().first:
            return False
        return self.go_to_page(1)

    def previous_page(self) -> bool:
        if not self.navigation().previous:
            return False
        return self.go_to_page(self.state.page - 1)

    def next_page(self) -> bool:
        if not self.navigation().next:
            return False
        return self.go_to_page(self.state.page + 1)

    def last_page(self) -> bool:
        if not self.navigation().last:
            return False
        return self.go_to_page(self.total_pages)

    # Edit session

    def begin_create(self):
        self.edit_session += 1
        self.edit_started_at = time.monotonic()
        self.state.draft = UserRecord.blank()
        self.state.intent = EditIntent.CREATE

    def begin_edit(self, record: UserRecord):
        self.edit_session += 1
        self.edit_started_at = time.monotonic()
        self.state.draft = record.copy()
        self.state.intent = EditIntent.EDIT

    def update_draft(self, field_name: str, value: str) -> bool:
        """Set one text field of the in-progress record."""
        if field_name not in WIRE_FIELDS:
            raise ValueError(f"Unknown user field: {field_name}")
        if self.state.draft is None:
            logger.warning(f"Ignoring edit of {field_name}: no add/edit in progress")
            return False
        setattr(self.state.draft, field_name, value)
        return True

    def cancel_edit(self):
        self.state.draft = None
        self.state.intent = None

    # Directory round trips

    def _replace_users(self, users: List[UserRecord]):
        self.state.users = list(users)
        self.state.loaded = True
        if self.clamp_page:
            self.state.page = min(max(self.state.page, 1), max(self.total_pages, 1))

    async def load(self) -> bool:
        """Fetch the full collection. The current page is kept as is."""
        try:
            users = await self.client.list_users()
        except DirectoryServiceError as e:
            logger.error(f"Error fetching users: {e}")
            self.notifications.error("Failed to load users")
            return False
        self.state.users = list(users)
        self.state.loaded = True
        return True

    async def commit(self) -> bool:
        """
        Save the in-progress record: create it or update it depending on the intent.

        By default the edit surface closes before the round trip resolves.
        With ``wait_for_save`` it stays open until the save succeeds, and a
        failed save keeps the draft so it can be retried.
        """
        if self.state.draft is None or self.state.intent is None:
            logger.warning("Commit requested with no add/edit in progress")
            return False

        draft = self.state.draft.copy()
        intent = self.state.intent
        session = self.edit_session
        if not self.wait_for_save:
            self.cancel_edit()

        action = "add" if intent is EditIntent.CREATE else "update"
        try:
            if intent is EditIntent.CREATE:
                users = await self.client.create_user(draft)
            else:
                users = await self.client.update_user(draft)
        except DirectoryServiceError as e:
            logger.error(f"Error {'adding' if action == 'add' else 'updating'} user: {e}")
            self.notifications.error(f"Failed to {action} user")
            return False

        self._replace_users(users)
        if self.state.draft is not None and self.edit_session == session:
            self.cancel_edit()
        self.notifications.success("User added" if action == "add" else "User updated")
        return True

    async def remove(self, record: UserRecord) -> bool:
        """Delete ``record`` on the directory. The page is only adjusted when clamping is enabled."""
        try:
            users = await self.client.delete_user(record.id)
        except DirectoryServiceError as e:
            logger.error(f"Error deleting user {record.id}: {e}")
            self.notifications.error("Failed to delete user")
            return False
        self._replace_users(users)
        self.notifications.success("User deleted")
        return True
