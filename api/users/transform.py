"""
Flat `users` row -> nested user record.

Pure functions: no I/O, the input row is never modified. Columns missing
from the row come out as None.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from .fields import FIELDS, REDACTED, FieldSpec

MASK_CHAR = "*"
IBAN_MASK = "****"
CARD_VISIBLE_TAIL = 4
IBAN_VISIBLE_EDGE = 4

_CARD_MASKABLE = re.compile(r"[0-9A-Za-z]")


def mask_card_number(value: str | None) -> str | None:
    """
    Keep the last four characters; letters and digits before them become
    `*`, separators stay put so the printed format is unchanged.

    >>> mask_card_number("4111 1111 1111 1234")
    '**** **** **** 1234'
    """
    if not value:
        return None
    text = str(value)
    if len(text) <= CARD_VISIBLE_TAIL:
        return text
    head, tail = text[:-CARD_VISIBLE_TAIL], text[-CARD_VISIBLE_TAIL:]
    return _CARD_MASKABLE.sub(MASK_CHAR, head) + tail


def mask_iban(value: str | None) -> str | None:
    """
    First four + fixed `****` + last four, whatever the original length.
    """
    if not value:
        return None
    text = str(value)
    if len(text) < IBAN_VISIBLE_EDGE * 2:
        return text
    return text[:IBAN_VISIBLE_EDGE] + IBAN_MASK + text[-IBAN_VISIBLE_EDGE:]


_MASKERS = {
    "bank.cardNumber": mask_card_number,
    "bank.iban": mask_iban,
}


def _output_value(field: FieldSpec, row: Mapping[str, Any]) -> Any:
    if not field.readable:
        return REDACTED
    value = row.get(field.column)
    masker = _MASKERS.get(field.path)
    if masker is not None:
        return masker(value)
    if field.sensitive:
        return REDACTED
    if isinstance(value, Decimal):
        # NUMERIC columns (height, weight, coordinates) are emitted as JSON numbers.
        return float(value)
    return value


def to_user(row: Mapping[str, Any]) -> dict[str, Any]:
    user: dict[str, Any] = {}
    for field in FIELDS:
        *groups, leaf = field.parts
        node = user
        for group in groups:
            node = node.setdefault(group, {})
        node[leaf] = _output_value(field, row)
    return user


def to_users(rows: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
    return [to_user(row) for row in rows]
