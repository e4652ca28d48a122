"""
Client for the remote user directory REST service.

    GET    /users        -> JSON array of users
    POST   /users        -> JSON array, or an object wrapping it in "users"
    PUT    /users/{id}   -> JSON array
    DELETE /users/{id}   -> JSON array

Each call is a single-shot coroutine: the blocking request runs in a worker
thread so several calls can be in flight at once. There are no retries and
no timeout unless one is configured. Any failure is raised as
DirectoryServiceError.
"""
import asyncio
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from userdesk.exceptions import DirectoryServiceError, RecordFormatError
from userdesk.models import UserRecord, parse_collection
from userdesk.utils.config import Config

logger = logging.getLogger(__name__)

USERS_PATH = "users"
# Field that wraps the collection in creation responses
COLLECTION_KEY = "users"


class DirectoryClient:
    def __init__(self, base_url: str, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> "DirectoryClient":
        return cls(Config.DIRECTORY_API_URL, timeout=Config.DIRECTORY_TIMEOUT, session=session)

    def _url(self, user_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/{USERS_PATH}"
        if user_id is not None:
            url = f"{url}/{quote(str(user_id), safe='')}"
        return url

    def _request(self, method: str, url: str, payload: Optional[dict] = None) -> Any:
        """Issue one blocking request and return the decoded JSON body."""
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as http_err:
            status = http_err.response.status_code if http_err.response is not None else None
            raise DirectoryServiceError(f"{method} {url} failed: {http_err}", status_code=status) from http_err
        except requests.exceptions.RequestException as e:
            raise DirectoryServiceError(f"{method} {url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DirectoryServiceError(
                f"{method} {url} returned a non-JSON body", status_code=response.status_code
            ) from e

    async def _call(self, method: str, url: str, payload: Optional[dict] = None) -> Any:
        return await asyncio.to_thread(self._request, method, url, payload)

    @staticmethod
    def _extract_collection(data: Any) -> List[UserRecord]:
        """Accept either a bare array or an object carrying the array under "users"."""
        if isinstance(data, dict):
            if COLLECTION_KEY not in data:
                raise RecordFormatError(f"Response has no '{COLLECTION_KEY}' field")
            data = data[COLLECTION_KEY]
        return parse_collection(data)

    async def list_users(self) -> List[UserRecord]:
        """Fetch the full user collection."""
        data = await self._call("GET", self._url())
        users = parse_collection(data)
        logger.info(f"Fetched {len(users)} users from directory")
        return users

    async def create_user(self, record: UserRecord) -> List[UserRecord]:
        """
        Create a user and return the directory's updated collection.

        The identifier is never sent; the directory assigns it.
        """
        data = await self._call("POST", self._url(), record.to_payload(include_id=False))
        users = self._extract_collection(data)
        logger.info(f"Created user {record.email or '(no email)'}; directory now has {len(users)} users")
        return users

    async def update_user(self, record: UserRecord) -> List[UserRecord]:
        """Update the user addressed by ``record.id`` and return the updated collection."""
        if not record.id:
            raise DirectoryServiceError("Cannot update a user without an identifier")
        data = await self._call("PUT", self._url(record.id), record.to_payload(include_id=True))
        users = self._extract_collection(data)
        logger.info(f"Updated user {record.id}; directory now has {len(users)} users")
        return users

    async def delete_user(self, user_id: str) -> List[UserRecord]:
        """Delete a user by identifier and return the updated collection."""
        if not user_id:
            raise DirectoryServiceError("Cannot delete a user without an identifier")
        data = await self._call("DELETE", self._url(user_id))
        users = self._extract_collection(data)
        logger.info(f"Deleted user {user_id}; directory now has {len(users)} users")
        return users

    def close(self):
        self.session.close()
