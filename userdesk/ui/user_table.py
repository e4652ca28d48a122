import logging
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd
import streamlit as st

from userdesk.controller import PageView, UserListController, navigation
from userdesk.models import FIELD_LABELS, UserRecord
from userdesk.notifications import ERROR, NotificationCenter
from userdesk.utils.async_helpers import run_async_safely

logger = logging.getLogger(__name__)

CONTROLLER_KEY = "user_list_controller"
LOAD_ATTEMPTED_KEY = "users_load_attempted"

TABLE_COLUMNS = ["ID", "First Name", "Last Name", "Email", "Department"]


@dataclass(frozen=True)
class PageButton:
    label: str
    target: int
    disabled: bool
    current: bool = False


def get_controller() -> UserListController:
    """Return the session's controller, creating it on first use."""
    if CONTROLLER_KEY not in st.session_state:
        st.session_state[CONTROLLER_KEY] = UserListController.from_config()
    return st.session_state[CONTROLLER_KEY]


def ensure_loaded(controller: UserListController):
    """Fetch the user list once per session; a failed fetch is not retried."""
    if st.session_state.get(LOAD_ATTEMPTED_KEY):
        return
    st.session_state[LOAD_ATTEMPTED_KEY] = True
    run_async_safely(controller.load())


def records_to_dataframe(rows: List[UserRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [[r.id or "", r.first_name, r.last_name, r.email, r.department] for r in rows],
        columns=TABLE_COLUMNS,
    )


def page_buttons(controller: UserListController) -> List[PageButton]:
    """Describe the pagination bar: first, previous, one button per page, next, last."""
    state = controller.state
    nav = navigation(state)
    total_pages = controller.total_pages
    buttons = [
        PageButton("«", 1, not nav.first),
        PageButton("‹", state.page - 1, not nav.previous),
    ]
    for page in range(1, total_pages + 1):
        buttons.append(PageButton(str(page), page, False, current=page == state.page))
    buttons.append(PageButton("›", state.page + 1, not nav.next))
    buttons.append(PageButton("»", total_pages, not nav.last))
    return buttons


def render_notifications(notifications: NotificationCenter):
    for notification in notifications.drain():
        icon = "❌" if notification.level == ERROR else "✅"
        st.toast(notification.message, icon=icon)


def handle_add(controller: UserListController):
    controller.begin_create()
    _add_user_dialog(controller)


def handle_edit(controller: UserListController, record: UserRecord):
    controller.begin_edit(record)
    _edit_user_dialog(controller)


def handle_delete(controller: UserListController, record: UserRecord):
    run_async_safely(controller.remove(record))
    st.rerun()


def handle_cancel(controller: UserListController):
    controller.cancel_edit()
    st.rerun()


def handle_save(controller: UserListController) -> bool:
    """
    Save the dialog's record.

    The dialog closes (full rerun) whenever the controller has closed the
    edit session; in wait-for-save mode a failed save keeps it open.
    """
    saved = run_async_safely(controller.commit())
    if not controller.state.is_editing:
        st.rerun()
    return saved


def handle_page(controller: UserListController, button: PageButton):
    if controller.go_to_page(button.target):
        st.rerun()


def _render_user_form(controller: UserListController):
    draft = controller.state.draft
    if draft is None:
        st.info("Nothing to edit.")
        return

    session = controller.edit_session
    for field_name, label in FIELD_LABELS.items():
        value = st.text_input(
            f"{label} *",
            value=getattr(draft, field_name),
            key=f"user_form_{session}_{field_name}",
        )
        controller.update_draft(field_name, value)

    missing = draft.missing_fields()
    if missing:
        st.caption("Required: " + ", ".join(FIELD_LABELS[name] for name in missing))

    # Shown only when a failed save kept the dialog open
    for notification in controller.notifications.active(since=controller.edit_started_at):
        if notification.level == ERROR:
            st.error(notification.message)

    cancel_col, save_col = st.columns(2)
    with cancel_col:
        if st.button("Cancel", key=f"user_form_{session}_cancel", use_container_width=True):
            handle_cancel(controller)
    with save_col:
        if st.button("Save", key=f"user_form_{session}_save", type="primary", use_container_width=True):
            handle_save(controller)


_add_user_dialog = st.dialog("Add User")(_render_user_form)
_edit_user_dialog = st.dialog("Edit User")(_render_user_form)


def _render_table(view: PageView) -> Optional[UserRecord]:
    """Render the current page and return the selected row, if any."""
    event = st.dataframe(
        records_to_dataframe(view.rows),
        key=f"users_table_{view.page}",
        hide_index=True,
        use_container_width=True,
        on_select="rerun",
        selection_mode="single-row",
    )
    selected_rows = event.selection.rows if event is not None else []
    if selected_rows and selected_rows[0] < len(view.rows):
        return view.rows[selected_rows[0]]
    return None


def _render_pagination(controller: UserListController):
    buttons = page_buttons(controller)
    columns = st.columns(len(buttons))
    for column, button in zip(columns, buttons):
        with column:
            clicked = st.button(
                button.label,
                key=f"page_button_{button.label}",
                disabled=button.disabled,
                type="primary" if button.current else "secondary",
            )
            if clicked:
                handle_page(controller, button)


def render_user_table(controller: Optional[UserListController] = None):
    """Render the user list: header, table, row actions, pagination and the add/edit dialog."""
    controller = controller or get_controller()
    ensure_loaded(controller)
    render_notifications(controller.notifications)

    title_col, add_col = st.columns([4, 1])
    with title_col:
        st.header("Users List")
    with add_col:
        add_clicked = st.button("Add User", key="add_user_button", use_container_width=True)

    dialog_opened = False
    view = controller.visible_page()
    if view.rows:
        selected = _render_table(view)
        st.caption(f"Showing {view.first_index}-{view.last_index} of {view.total} users")

        edit_col, delete_col, _ = st.columns([1, 1, 4])
        with edit_col:
            edit_clicked = st.button("✏️ Edit", key="edit_user_button",
                                     disabled=selected is None, use_container_width=True)
        with delete_col:
            delete_clicked = st.button("🗑️ Delete", key="delete_user_button",
                                       disabled=selected is None, use_container_width=True)
        if edit_clicked and selected is not None:
            handle_edit(controller, selected)
            dialog_opened = True
        elif delete_clicked and selected is not None:
            handle_delete(controller, selected)
    elif not controller.state.loaded:
        st.info("⏳ Loading")
    else:
        st.info("No users to show on this page.")

    _render_pagination(controller)

    if add_clicked:
        handle_add(controller)
        dialog_opened = True

    # A dialog dismissed with its close button leaves a stale session behind
    if not dialog_opened and controller.state.is_editing:
        logger.debug(f"Discarding abandoned {controller.state.intent} session")
        controller.cancel_edit()


__all__ = [
    "get_controller",
    "page_buttons",
    "records_to_dataframe",
    "render_user_table",
]
