import asyncio
from typing import Any

import pytest
import requests

from frontdesk.confirm_modal import ConfirmModal
from frontdesk.models import StoredRecord
from frontdesk.records import RecordsClient, record_from_wire
from frontdesk.records_app import RecordsApp


class StubResponse:
    def __init__(self, payload: Any = None, status: int = 200) -> None:
        self.payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return self.payload


class StubHttp:
    """Just enough of requests.Session for the records client."""

    def __init__(self, payload: Any = None, status: int = 200) -> None:
        self.payload = payload
        self.status = status
        self.calls: list[tuple[str, str, Any]] = []

    def get(self, url, timeout=None):
        self.calls.append(("GET", url, timeout))
        return StubResponse(self.payload, self.status)

    def delete(self, url, timeout=None):
        self.calls.append(("DELETE", url, timeout))
        return StubResponse(None, self.status)


class FakeRecordsClient:
    def __init__(self, records: list[StoredRecord], fail_delete: bool = False) -> None:
        self.records = list(records)
        self.fail_delete = fail_delete
        self.deleted: list[str] = []

    def list_records(self) -> list[StoredRecord]:
        return list(self.records)

    def delete_record(self, record_id: str) -> None:
        if self.fail_delete:
            raise requests.ConnectionError("backend down")
        self.deleted.append(record_id)


def test_record_decoding_fills_gaps():
    record = record_from_wire({"id": 7, "times": ["10:00:00.000", None, ""], "observacion": None})

    assert record == StoredRecord(id="7", times=("10:00:00.000", None, None), observation="")


def test_list_records_hits_registros_and_skips_entries_without_id():
    http = StubHttp([{"id": "a", "times": ["x"], "observacion": "ok"}, {"times": []}, "junk"])
    client = RecordsClient("http://backend/", http=http, timeout=3)

    records = client.list_records()

    assert [r.id for r in records] == ["a"]
    assert http.calls == [("GET", "http://backend/registros", 3)]


def test_delete_record_targets_the_record():
    http = StubHttp()
    client = RecordsClient("http://backend", http=http, timeout=3)

    client.delete_record("a")

    assert http.calls == [("DELETE", "http://backend/registros/a", 3)]


def test_http_errors_propagate():
    client = RecordsClient("http://backend", http=StubHttp(status=500))

    with pytest.raises(requests.HTTPError):
        client.list_records()


def test_delete_needs_confirmation():
    client = FakeRecordsClient([StoredRecord(id="a"), StoredRecord(id="b")])
    app = RecordsApp(client)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            assert [r.id for r in app.records] == ["a", "b"]

            await pilot.press("d")
            assert isinstance(app.screen, ConfirmModal)
            await pilot.press("n")
            await pilot.pause()
            assert client.deleted == []

            await pilot.press("d", "y")
            await pilot.pause()
            await pilot.pause()
            assert client.deleted == ["a"]
            assert [r.id for r in app.records] == ["b"]
            assert app.system_status == "Registro eliminado con éxito"

    asyncio.run(scenario())


def test_failed_delete_keeps_record():
    client = FakeRecordsClient([StoredRecord(id="a")], fail_delete=True)
    app = RecordsApp(client)

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("d", "y")
            await pilot.pause()
            await pilot.pause()
            assert [r.id for r in app.records] == ["a"]
            assert app.system_status == "No se pudo eliminar el registro"

    asyncio.run(scenario())
