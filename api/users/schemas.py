"""
Pydantic schemas for the two kinds of user records a client holds.

- PersistedUser: a record served by this API (integer id, stored)
- LocalUser: an "add user" entry that only lives in the client session and
  is never sent to the store

`UserRecord` tells them apart by `isLocal` alone. Every record this API
serves goes through `served()`, so it always carries `isLocal: false`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

PERSISTED = "persisted"
LOCAL = "local"


class LocalCompany(BaseModel):
    name: str = ""
    title: str = ""


class LocalAddress(BaseModel):
    country: str = ""


class LocalUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., pattern=r"^local-[0-9a-f]{32}$")
    is_local: Literal[True] = Field(default=True, alias="isLocal")
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    company: LocalCompany = Field(default_factory=LocalCompany)
    address: LocalAddress = Field(default_factory=LocalAddress)


class PersistedUser(BaseModel):
    """
    Store-backed record as returned by GET /users. Only the identity is
    typed here; the rest of the nested record is carried through untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: int = Field(..., ge=1)
    is_local: Literal[False] = Field(default=False, alias="isLocal")


def record_kind(value: Any) -> str:
    if isinstance(value, Mapping):
        flag = value.get("isLocal", value.get("is_local", False))
    else:
        flag = getattr(value, "is_local", False)
    return LOCAL if flag is True else PERSISTED


UserRecord = Annotated[
    Union[
        Annotated[PersistedUser, Tag(PERSISTED)],
        Annotated[LocalUser, Tag(LOCAL)],
    ],
    Discriminator(record_kind),
]

_records: TypeAdapter[PersistedUser | LocalUser] = TypeAdapter(UserRecord)


def parse_record(data: Mapping[str, Any]) -> PersistedUser | LocalUser:
    return _records.validate_python(dict(data))


def served(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Tag a transformed store record as persisted and return its wire form.
    """
    user = parse_record({**record, "isLocal": False})
    return user.model_dump(by_alias=True)
