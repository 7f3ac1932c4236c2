"""
Shared fixtures. No live database: repository calls are monkeypatched.
"""

from __future__ import annotations

import copy
from datetime import date, datetime, timezone
from typing import Any

import pytest


def _address(city: str, country: str, lat: float, lng: float) -> dict[str, Any]:
    return {
        "address": "626 Main Street",
        "city": city,
        "coordinates": {"lat": lat, "lng": lng},
        "postalCode": "29112",
        "state": "Mississippi",
        "country": country,
    }


NESTED_USER: dict[str, Any] = {
    "id": 1,
    "firstName": "Emily",
    "lastName": "Johnson",
    "email": "emily.johnson@x.dummyjson.com",
    "phone": "+81 965-431-3024",
    "username": "emilys",
    "password": "emilyspass",
    "birthDate": date(1996, 5, 30),
    "image": "https://dummyjson.com/icon/emilys/128",
    "bloodGroup": "O-",
    "height": 193.24,
    "weight": 63.16,
    "eyeColor": "Green",
    "hair": {"color": "Brown", "type": "Curly"},
    "domain": "emilys.example.com",
    "ip": "42.48.100.32",
    "macAddress": "47:fa:41:18:ec:eb",
    "university": "University of Wisconsin--Madison",
    "address": _address("Phoenix", "United States", -77.16213, -92.084824),
    "bank": {
        "cardExpire": "03/26",
        "cardNumber": "9289760655481815",
        "cardType": "Elo",
        "currency": "CNY",
        "iban": "YPUXISOBI7TTHPK2BR3HAIXL",
    },
    "company": {
        "department": "Engineering",
        "name": "Dooley, Kozey and Cronin",
        "title": "Sales Manager",
        "address": _address("San Francisco", "United States", 37.7749, -122.4194),
    },
    "crypto": {
        "coin": "Bitcoin",
        "wallet": "0xb9fc2fe63b2a6c003f1c324c3bfa53259162181a",
        "network": "Ethereum (ERC20)",
    },
    "created_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    "updated_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
}


@pytest.fixture
def nested_user() -> dict[str, Any]:
    return copy.deepcopy(NESTED_USER)


@pytest.fixture
def flat_row(nested_user: dict[str, Any]) -> dict[str, Any]:
    from users import fields

    row = fields.flatten(nested_user)
    # The store never hands the password column back to the API.
    row.pop("password")
    return row


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    import main

    # No `with`: the lifespan (and its DB pool) is not started.
    return TestClient(main.app)
