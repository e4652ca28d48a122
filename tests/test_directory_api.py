import pytest
import requests
from unittest.mock import Mock

from userdesk.api.directory import DirectoryClient
from userdesk.exceptions import DirectoryServiceError, RecordFormatError
from userdesk.models import UserRecord

API_URL = "http://directory.test"

ADA = {"_id": "1", "FirstName": "Ada", "LastName": "Lovelace", "Email": "ada@example.com", "Department": "Research"}
GRACE = {"_id": "2", "FirstName": "Grace", "LastName": "Hopper", "Email": "grace@example.com", "Department": "Navy"}


def make_response(json_data=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Server Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def mock_session():
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def client(mock_session):
    return DirectoryClient(API_URL + "/", session=mock_session)


def test_client_sets_json_headers(client, mock_session):
    assert mock_session.headers["Content-Type"] == "application/json"
    assert client.base_url == API_URL


def test_from_config_uses_configured_url(mock_session):
    from userdesk.utils.config import Config
    client = DirectoryClient.from_config(session=mock_session)
    assert client.base_url == Config.DIRECTORY_API_URL
    assert client.timeout == Config.DIRECTORY_TIMEOUT


@pytest.mark.asyncio
async def test_list_users(client, mock_session):
    mock_session.request.return_value = make_response([ADA, GRACE])

    users = await client.list_users()

    assert [u.first_name for u in users] == ["Ada", "Grace"]
    mock_session.request.assert_called_once_with("GET", f"{API_URL}/users", json=None, timeout=None)


@pytest.mark.asyncio
async def test_create_user_sends_no_identifier_and_unwraps_users(client, mock_session):
    mock_session.request.return_value = make_response({"message": "created", "users": [ADA, GRACE]})
    record = UserRecord(id="should-not-be-sent", first_name="Grace", last_name="Hopper",
                        email="grace@example.com", department="Navy")

    users = await client.create_user(record)

    assert len(users) == 2
    method, url = mock_session.request.call_args.args
    body = mock_session.request.call_args.kwargs["json"]
    assert (method, url) == ("POST", f"{API_URL}/users")
    assert "_id" not in body
    assert body["FirstName"] == "Grace"


@pytest.mark.asyncio
async def test_create_user_accepts_bare_array(client, mock_session):
    mock_session.request.return_value = make_response([ADA])
    users = await client.create_user(UserRecord.blank())
    assert users[0].id == "1"


@pytest.mark.asyncio
async def test_create_user_rejects_wrapper_without_users(client, mock_session):
    mock_session.request.return_value = make_response({"message": "created"})
    with pytest.raises(RecordFormatError):
        await client.create_user(UserRecord.blank())


@pytest.mark.asyncio
async def test_update_user_addresses_record_id(client, mock_session):
    mock_session.request.return_value = make_response([ADA])
    record = UserRecord.from_dict(ADA)
    record.department = "Mathematics"

    await client.update_user(record)

    method, url = mock_session.request.call_args.args
    assert (method, url) == ("PUT", f"{API_URL}/users/1")
    assert mock_session.request.call_args.kwargs["json"]["Department"] == "Mathematics"


@pytest.mark.asyncio
async def test_update_user_quotes_identifier(client, mock_session):
    mock_session.request.return_value = make_response([])
    await client.update_user(UserRecord(id="a/b c"))
    assert mock_session.request.call_args.args[1] == f"{API_URL}/users/a%2Fb%20c"


@pytest.mark.asyncio
async def test_update_user_without_id_issues_no_request(client, mock_session):
    with pytest.raises(DirectoryServiceError):
        await client.update_user(UserRecord.blank())
    mock_session.request.assert_not_called()


@pytest.mark.asyncio
async def test_delete_user(client, mock_session):
    mock_session.request.return_value = make_response([GRACE])

    users = await client.delete_user("1")

    assert [u.id for u in users] == ["2"]
    mock_session.request.assert_called_once_with("DELETE", f"{API_URL}/users/1", json=None, timeout=None)


@pytest.mark.asyncio
async def test_delete_user_without_id_issues_no_request(client, mock_session):
    with pytest.raises(DirectoryServiceError):
        await client.delete_user(None)
    mock_session.request.assert_not_called()


@pytest.mark.asyncio
async def test_http_error_becomes_directory_error(client, mock_session):
    mock_session.request.return_value = make_response({"error": "boom"}, status_code=500)

    with pytest.raises(DirectoryServiceError) as excinfo:
        await client.list_users()

    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_connection_error_becomes_directory_error(client, mock_session):
    mock_session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(DirectoryServiceError) as excinfo:
        await client.list_users()

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_becomes_directory_error(client, mock_session):
    mock_session.request.return_value = make_response(json_error=ValueError("Expecting value"))
    with pytest.raises(DirectoryServiceError):
        await client.list_users()


@pytest.mark.asyncio
async def test_malformed_record_becomes_directory_error(client, mock_session):
    mock_session.request.return_value = make_response([{"_id": "1", "FirstName": 3}])
    with pytest.raises(DirectoryServiceError):
        await client.list_users()


def test_timeout_is_passed_through(mock_session):
    client = DirectoryClient(API_URL, timeout=5, session=mock_session)
    mock_session.request.return_value = make_response([])
    client._request("GET", client._url())
    assert mock_session.request.call_args.kwargs["timeout"] == 5
