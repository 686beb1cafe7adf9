"""Tests for TransferStore against the in-memory collection."""

from datetime import datetime, timezone

import pytest

from errors import NotFound, ValidationError


def _record(**overrides):
    record = {
        "fromCountry": "USA",
        "toCountry": "Sri Lanka",
        "fromCurrency": "USD",
        "toCurrency": "LKR",
        "amount": 100.0,
        "convertedAmount": 30000.0,
        "exchangeRate": 300.0,
    }
    record.update(overrides)
    return record


@pytest.mark.anyio
async def test_insert_assigns_id_and_date(store, collection):
    document = await store.insert(_record())

    assert len(document["_id"]) == 24
    assert document["date"].tzinfo is not None
    assert collection.documents == [document]


@pytest.mark.anyio
@pytest.mark.parametrize("overrides", [
    {"fromCountry": "France"},
    {"toCurrency": "EUR"},
    {"amount": -1.0},
    {"convertedAmount": -0.01},
    {"fromCurrency": "INR"},
    {"exchangeRate": None},
    {"unexpected": "field"},
])
async def test_insert_rejects_invalid_record(store, collection, overrides):
    with pytest.raises(ValidationError):
        await store.insert(_record(**overrides))

    assert collection.documents == []


@pytest.mark.anyio
async def test_insert_rejects_missing_field(store, collection):
    record = _record()
    del record["exchangeRate"]

    with pytest.raises(ValidationError):
        await store.insert(record)

    assert collection.documents == []


@pytest.mark.anyio
async def test_list_all_newest_first(store):
    for day in (3, 1, 5, 2, 4):
        await store.insert(_record(date=datetime(2026, 10, day, tzinfo=timezone.utc)))

    transfers = await store.list_all()

    assert len(transfers) == 5
    assert [transfer["date"].day for transfer in transfers] == [5, 4, 3, 2, 1]


@pytest.mark.anyio
async def test_delete_by_id(store):
    first = await store.insert(_record())
    second = await store.insert(_record(amount=1.0, convertedAmount=300.0))

    removed = await store.delete_by_id(first["_id"])

    assert removed["_id"] == first["_id"]
    assert [transfer["_id"] for transfer in await store.list_all()] == [second["_id"]]
    with pytest.raises(NotFound):
        await store.delete_by_id(first["_id"])
