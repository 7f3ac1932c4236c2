"""
Field table for the `users` store.

The API speaks nested user records (`company.address.city`); the store keeps
one wide row with a column per leaf (`company_address_city`). This table is
the only place the two shapes are related: query building, row
transformation and flattening for imports all read from it.

Column name = path segments joined with "_". Segments keep their camelCase,
so columns are always double-quoted in SQL.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TABLE = "users"

# Redaction marker emitted for write-only fields.
REDACTED = "***"


@dataclass(frozen=True)
class FieldSpec:
    path: str
    column: str
    sensitive: bool = False
    # False for write-only fields; they are never selected.
    readable: bool = True

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.path.split("."))


def _address(prefix: str) -> tuple[str, ...]:
    return (
        f"{prefix}.address",
        f"{prefix}.city",
        f"{prefix}.coordinates.lat",
        f"{prefix}.coordinates.lng",
        f"{prefix}.postalCode",
        f"{prefix}.state",
        f"{prefix}.country",
    )


_PATHS: tuple[str, ...] = (
    "id",
    "firstName",
    "lastName",
    "email",
    "phone",
    "username",
    "password",
    "birthDate",
    "image",
    "bloodGroup",
    "height",
    "weight",
    "eyeColor",
    "hair.color",
    "hair.type",
    "domain",
    "ip",
    "macAddress",
    "university",
    *_address("address"),
    "bank.cardExpire",
    "bank.cardNumber",
    "bank.cardType",
    "bank.currency",
    "bank.iban",
    "company.department",
    "company.name",
    "company.title",
    *_address("company.address"),
    "crypto.coin",
    "crypto.wallet",
    "crypto.network",
    "created_at",
    "updated_at",
)

SENSITIVE_PATHS = frozenset({"password", "bank.cardNumber", "bank.iban"})
WRITE_ONLY_PATHS = frozenset({"password"})


def _column_name(path: str) -> str:
    return path.replace(".", "_")


FIELDS: tuple[FieldSpec, ...] = tuple(
    FieldSpec(
        path=path,
        column=_column_name(path),
        sensitive=path in SENSITIVE_PATHS,
        readable=path not in WRITE_ONLY_PATHS,
    )
    for path in _PATHS
)

_BY_PATH: dict[str, FieldSpec] = {f.path: f for f in FIELDS}
_BY_COLUMN: dict[str, FieldSpec] = {f.column: f for f in FIELDS}

if len(_BY_COLUMN) != len(FIELDS):
    raise RuntimeError("users field table maps two paths to the same column")

READABLE_FIELDS: tuple[FieldSpec, ...] = tuple(f for f in FIELDS if f.readable)


def column_for(path: str) -> str:
    return _BY_PATH[path].column


def path_for(column: str) -> str:
    return _BY_COLUMN[column].path


def is_sensitive(path: str) -> bool:
    return _BY_PATH[path].sensitive


def quote_ident(column: str) -> str:
    return '"' + column.replace('"', '""') + '"'


def col(path: str) -> str:
    """
    Quoted column for a nested path, ready to drop into SQL.
    """
    return quote_ident(column_for(path))


SELECT_COLUMNS = ", ".join(quote_ident(f.column) for f in READABLE_FIELDS)


def flatten(record: dict[str, Any]) -> dict[str, Any]:
    """
    Nested user record -> {column: value} for every field the record carries.

    Missing groups or leaves are left out rather than filled with None, so an
    INSERT built from the result only names the columns it has values for.
    """
    flat: dict[str, Any] = {}
    for field in FIELDS:
        node: Any = record
        for part in field.parts:
            if not isinstance(node, dict) or part not in node:
                break
            node = node[part]
        else:
            flat[field.column] = node
    return flat
