"""
User record model shared by the directory client, the controller and the view.

Records travel over the wire with the directory service's field names
(``_id``, ``FirstName``, ``LastName``, ``Email``, ``Department``) and are
validated here, at the service boundary, rather than trusted blindly.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from userdesk.exceptions import RecordFormatError

ID_KEY = "_id"

# attribute name -> wire name
WIRE_FIELDS = {
    "first_name": "FirstName",
    "last_name": "LastName",
    "email": "Email",
    "department": "Department",
}

FIELD_LABELS = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "department": "Department",
}


@dataclass
class UserRecord:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    department: str = ""
    id: Optional[str] = None

    @classmethod
    def blank(cls) -> "UserRecord":
        """Return the empty record used when adding a user."""
        return cls()

    @classmethod
    def from_dict(cls, payload: Any) -> "UserRecord":
        """
        Build a record from a directory JSON object.

        Missing text fields become empty strings. Text fields that are not
        strings, or an identifier that is neither a string nor a number,
        raise RecordFormatError.
        """
        if not isinstance(payload, dict):
            raise RecordFormatError(f"Expected a user object, got {type(payload).__name__}")

        values = {}
        for attr, wire_name in WIRE_FIELDS.items():
            value = payload.get(wire_name, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise RecordFormatError(
                    f"Field {wire_name} must be text, got {type(value).__name__}"
                )
            values[attr] = value

        raw_id = payload.get(ID_KEY)
        if raw_id is not None:
            # bool is an int subclass but never a valid identifier
            if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int, float)):
                raise RecordFormatError(
                    f"Field {ID_KEY} must be a string or number, got {type(raw_id).__name__}"
                )
            if isinstance(raw_id, float) and raw_id.is_integer():
                raw_id = int(raw_id)
            raw_id = str(raw_id)

        return cls(id=raw_id, **values)

    def to_payload(self, include_id: bool = False) -> Dict[str, str]:
        """Serialize to the directory's JSON shape; creation bodies leave the identifier out."""
        payload = {wire_name: getattr(self, attr) for attr, wire_name in WIRE_FIELDS.items()}
        if include_id and self.id is not None:
            payload[ID_KEY] = self.id
        return payload

    def copy(self) -> "UserRecord":
        return replace(self)

    def missing_fields(self) -> List[str]:
        """Names of required text fields that are still blank."""
        return [attr for attr in WIRE_FIELDS if not getattr(self, attr).strip()]


def parse_collection(payload: Any) -> List[UserRecord]:
    """Turn a directory JSON array into records, keeping the server's order."""
    if not isinstance(payload, list):
        raise RecordFormatError(f"Expected a list of users, got {type(payload).__name__}")
    return [UserRecord.from_dict(item) for item in payload]
