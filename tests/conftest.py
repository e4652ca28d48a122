"""
Pytest configuration for test suite
"""
import pytest
from unittest.mock import AsyncMock, Mock

from userdesk.api.directory import DirectoryClient
from userdesk.controller import UserListController
from userdesk.models import UserRecord
from userdesk.notifications import NotificationCenter


def make_users(count, start=0):
    """Build ``count`` records with predictable identifiers and fields."""
    return [
        UserRecord(
            id=f"id-{i}",
            first_name=f"First{i}",
            last_name=f"Last{i}",
            email=f"user{i}@example.com",
            department="Engineering" if i % 2 else "Sales",
        )
        for i in range(start, start + count)
    ]


@pytest.fixture
def users():
    return make_users(25)


@pytest.fixture
def mock_client(users):
    """A directory client whose round trips are AsyncMocks."""
    client = Mock(spec=DirectoryClient)
    client.list_users = AsyncMock(return_value=users)
    client.create_user = AsyncMock(return_value=users)
    client.update_user = AsyncMock(return_value=users)
    client.delete_user = AsyncMock(return_value=users)
    return client


@pytest.fixture
def notifications():
    return NotificationCenter(duration=3.0)


@pytest.fixture
def controller(mock_client, notifications):
    return UserListController(
        mock_client,
        notifications=notifications,
        page_size=20,
        wait_for_save=False,
        clamp_page=False,
    )


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables"""
    monkeypatch.setenv("TESTING", "true")
    monkeypatch.setenv("DIRECTORY_API_URL", "http://directory.test")
    monkeypatch.setenv("WAIT_FOR_SAVE", "false")
    monkeypatch.setenv("CLAMP_PAGE", "false")
