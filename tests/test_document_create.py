"""Tests for document upload and import task resolution."""

import asyncio
import json
import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from paperless_api.client import PaperlessClient
from paperless_api.clients.documents import parse_version, resolve_import
from paperless_api.errors import PaperlessRequestError, UnexpectedTaskStatusError
from paperless_api.schemas.documents import (
    DocumentCreated,
    DocumentCreation,
    ImportFailed,
    ImportStarted,
)
from paperless_api.schemas.tasks import PaperlessTask, PaperlessTaskStatus

BASE_URL = "http://paperless.test:8000"


class _StopPolling(Exception):
    pass


def _task(task_id, status="PENDING", related_document=None, result=None) -> dict:
    return {
        "id": 17,
        "task_id": str(task_id),
        "task_file_name": "invoice.pdf",
        "date_created": "2025-01-01T10:00:00Z",
        "status": status,
        "result": result,
        "acknowledged": False,
        "related_document": related_document,
    }


def _creation(**kwargs) -> DocumentCreation:
    return DocumentCreation(document=b"%PDF-1.4 test", filename="invoice.pdf", **kwargs)


def _upload_response(task_id, version="2.14.7") -> httpx.Response:
    return httpx.Response(200, content=json.dumps(str(task_id)), headers={"x-version": version})


# ------------------------------------------------------------------
# parse_version
# ------------------------------------------------------------------


class TestParseVersion:
    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("1.9.2", (1, 9, 2)),
            ("2.14.7", (2, 14, 7)),
            ("2.0", (2, 0)),
            (" 1.17.4 ", (1, 17, 4)),
        ],
    )
    def test_valid(self, header, expected):
        assert parse_version(header) == expected

    @pytest.mark.parametrize("header", [None, "", "2", "2.x.1", "v2.0.0", "1.2.3.4.5", "2.-1"])
    def test_invalid(self, header):
        assert parse_version(header) is None


# ------------------------------------------------------------------
# resolve_import
# ------------------------------------------------------------------


class TestResolveImport:
    def test_missing_task(self, task_id):
        result = resolve_import(task_id, None)
        assert isinstance(result, ImportFailed)
        assert str(task_id) in result.result

    def test_related_document_wins(self, task_id):
        task = PaperlessTask.model_validate(_task(task_id, "SUCCESS", related_document="42"))
        assert resolve_import(task_id, task) == DocumentCreated(id=42)

    def test_related_document_on_failure_still_created(self, task_id):
        task = PaperlessTask.model_validate(_task(task_id, "FAILURE", related_document=9))
        assert resolve_import(task_id, task) == DocumentCreated(id=9)

    def test_success_without_document(self, task_id):
        task = PaperlessTask.model_validate(_task(task_id, "SUCCESS"))
        result = resolve_import(task_id, task)
        assert isinstance(result, ImportFailed)
        assert "SUCCESS" in result.result

    def test_failure_carries_reason(self, task_id):
        task = PaperlessTask.model_validate(_task(task_id, "FAILURE", result="dup of #7"))
        assert resolve_import(task_id, task) == ImportFailed(result="dup of #7")

    @pytest.mark.parametrize("status", ["PENDING", "STARTED", "RETRY", "REVOKED"])
    def test_non_terminal_status_is_fatal(self, task_id, status):
        task = PaperlessTask.model_validate(_task(task_id, status))
        with pytest.raises(UnexpectedTaskStatusError):
            resolve_import(task_id, task)


def test_ready_states_end_polling():
    ready = {status for status in PaperlessTaskStatus if status.is_ready}
    assert ready == {PaperlessTaskStatus.SUCCESS, PaperlessTaskStatus.FAILURE, PaperlessTaskStatus.REVOKED}


# ------------------------------------------------------------------
# DocumentClient.create
# ------------------------------------------------------------------


class TestUpload:
    @pytest.mark.respx(base_url=BASE_URL)
    async def test_multipart_contains_only_given_fields(self, client, respx_mock: respx.MockRouter):
        route = respx_mock.post("/api/documents/post_document/").mock(
            return_value=httpx.Response(200, headers={"x-version": "1.9.2"})
        )

        await client.documents.create(
            _creation(
                title="Lorem Ipsum",
                created=datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC),
                correspondent_id=3,
                tag_ids=[1, 2],
                archive_serial_number=11,
            )
        )

        request = route.calls.last.request
        body = request.read().decode()
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert 'name="document"; filename="invoice.pdf"' in body
        assert "%PDF-1.4 test" in body
        assert 'name="title"\r\n\r\nLorem Ipsum' in body
        assert 'name="created"\r\n\r\n2025-01-02T03:04:05+00:00' in body
        assert 'name="correspondent"\r\n\r\n3' in body
        assert 'name="archive_serial_number"\r\n\r\n11' in body
        assert body.count('name="tags"') == 2
        assert 'name="document_type"' not in body
        assert 'name="storage_path"' not in body

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_rejected_upload_raises_with_body(self, client, respx_mock: respx.MockRouter):
        respx_mock.post("/api/documents/post_document/").mock(
            return_value=httpx.Response(400, text='{"document":["File type not supported"]}')
        )

        with pytest.raises(PaperlessRequestError) as exc_info:
            await client.documents.create(_creation())

        assert exc_info.value.status_code == 400
        assert "File type not supported" in str(exc_info.value)


class TestOldServers:
    @pytest.mark.parametrize("version", ["1.9.2", "1.8.0", "1.9", "garbage"])
    @pytest.mark.respx(base_url=BASE_URL, assert_all_called=False)
    async def test_returns_import_started_without_polling(self, client, respx_mock: respx.MockRouter, version):
        respx_mock.post("/api/documents/post_document/").mock(
            return_value=httpx.Response(200, text="OK", headers={"x-version": version})
        )
        tasks = respx_mock.get("/api/tasks/")

        result = await client.documents.create(_creation())

        assert result == ImportStarted()
        assert not tasks.called

    @pytest.mark.respx(base_url=BASE_URL, assert_all_called=False)
    async def test_missing_version_header(self, client, respx_mock: respx.MockRouter):
        respx_mock.post("/api/documents/post_document/").mock(return_value=httpx.Response(200))
        tasks = respx_mock.get("/api/tasks/")

        assert await client.documents.create(_creation()) == ImportStarted()
        assert not tasks.called


class TestTaskPolling:
    @pytest.mark.respx(base_url=BASE_URL)
    async def test_polls_until_success(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        tasks = respx_mock.get("/api/tasks/").mock(
            side_effect=[
                httpx.Response(200, json=[_task(task_id, "PENDING")]),
                httpx.Response(200, json=[_task(task_id, "STARTED")]),
                httpx.Response(200, json=[_task(task_id, "SUCCESS", related_document=42)]),
            ]
        )

        with patch("paperless_api.clients.documents.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await client.documents.create(_creation())

        assert result == DocumentCreated(id=42)
        assert tasks.call_count == 3
        assert tasks.calls.last.request.url.params["task_id"] == str(task_id)
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_failure_returns_reason(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        respx_mock.get("/api/tasks/").mock(
            return_value=httpx.Response(200, json=[_task(task_id, "FAILURE", result="dup of #7")])
        )

        result = await client.documents.create(_creation())

        assert result == ImportFailed(result="dup of #7")

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_success_without_document_is_failure(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        respx_mock.get("/api/tasks/").mock(return_value=httpx.Response(200, json=[_task(task_id, "SUCCESS")]))

        result = await client.documents.create(_creation())

        assert isinstance(result, ImportFailed)
        assert "SUCCESS" in result.result

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_unknown_task_is_failure(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        respx_mock.get("/api/tasks/").mock(return_value=httpx.Response(200, json=[]))

        result = await client.documents.create(_creation())

        assert isinstance(result, ImportFailed)
        assert str(task_id) in result.result

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_plain_text_task_id(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(
            return_value=httpx.Response(200, text=f"{task_id}\n", headers={"x-version": "2.0.0"})
        )
        respx_mock.get("/api/tasks/").mock(
            return_value=httpx.Response(200, json=[_task(task_id, "SUCCESS", related_document=5)])
        )

        assert await client.documents.create(_creation()) == DocumentCreated(id=5)

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_task_lookup_error_propagates(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        respx_mock.get("/api/tasks/").mock(return_value=httpx.Response(503, text="Service Unavailable"))

        with pytest.raises(PaperlessRequestError):
            await client.documents.create(_creation())

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_never_terminal_keeps_polling(self, client, respx_mock: respx.MockRouter, task_id):
        """Without a bound, a task stuck in STARTED is polled at the configured delay forever."""
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        tasks = respx_mock.get("/api/tasks/").mock(
            return_value=httpx.Response(200, json=[_task(task_id, "STARTED")])
        )
        polls = 25
        sleep = AsyncMock(side_effect=[None] * polls + [_StopPolling()])

        with (
            patch("paperless_api.clients.documents.asyncio.sleep", sleep),
            pytest.raises(_StopPolling),
        ):
            await client.documents.create(_creation())

        assert tasks.call_count == polls + 1
        assert sleep.await_count == polls + 1
        assert all(call.args == (0.5,) for call in sleep.await_args_list)
        assert sum(call.args[0] for call in sleep.await_args_list) == pytest.approx((polls + 1) * 0.5)

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_max_attempts_gives_up(self, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        tasks = respx_mock.get("/api/tasks/").mock(
            return_value=httpx.Response(200, json=[_task(task_id, "PENDING")])
        )

        async with PaperlessClient(BASE_URL, "token", task_poll_delay=2.0, task_poll_max_attempts=3) as c:
            with patch("paperless_api.clients.documents.asyncio.sleep", new_callable=AsyncMock) as sleep:
                result = await c.documents.create(_creation())

        assert isinstance(result, ImportFailed)
        assert "3 polls" in result.result
        assert tasks.call_count == 3
        assert sleep.await_count == 2

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_revoked_task_stops_polling(self, client, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        tasks = respx_mock.get("/api/tasks/").mock(
            return_value=httpx.Response(200, json=[_task(task_id, "REVOKED")])
        )

        with (
            patch("paperless_api.clients.documents.asyncio.sleep", new_callable=AsyncMock) as sleep,
            pytest.raises(UnexpectedTaskStatusError) as exc_info,
        ):
            await client.documents.create(_creation())

        assert exc_info.value.status == PaperlessTaskStatus.REVOKED
        assert tasks.call_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_zero_max_attempts_is_unbounded(self, respx_mock: respx.MockRouter, task_id):
        respx_mock.post("/api/documents/post_document/").mock(return_value=_upload_response(task_id))
        tasks = respx_mock.get("/api/tasks/").mock(
            side_effect=[
                httpx.Response(200, json=[_task(task_id, "PENDING")]),
                httpx.Response(200, json=[_task(task_id, "STARTED")]),
                httpx.Response(200, json=[_task(task_id, "SUCCESS", related_document=9)]),
            ]
        )

        async with PaperlessClient(BASE_URL, "token", task_poll_max_attempts=0) as c:
            with patch("paperless_api.clients.documents.asyncio.sleep", new_callable=AsyncMock):
                result = await c.documents.create(_creation())

        assert result == DocumentCreated(id=9)
        assert tasks.call_count == 3

    async def test_negative_max_attempts_rejected(self):
        with pytest.raises(ValueError, match="task_poll_max_attempts"):
            PaperlessClient(BASE_URL, "token", task_poll_max_attempts=-1)

    @pytest.mark.respx(base_url=BASE_URL)
    async def test_parallel_uploads_poll_independently(self, client, respx_mock: respx.MockRouter):
        first, second = uuid.uuid4(), uuid.uuid4()
        respx_mock.post("/api/documents/post_document/").mock(
            side_effect=[_upload_response(first), _upload_response(second)]
        )

        def task_lookup(request: httpx.Request) -> httpx.Response:
            requested = request.url.params["task_id"]
            if requested == str(first):
                return httpx.Response(200, json=[_task(first, "SUCCESS", related_document=1)])
            return httpx.Response(200, json=[_task(second, "FAILURE", result="duplicate")])

        respx_mock.get("/api/tasks/").mock(side_effect=task_lookup)

        results = await asyncio.gather(
            client.documents.create(_creation()),
            client.documents.create(_creation()),
        )

        assert sorted(results, key=lambda r: r.kind) == [
            DocumentCreated(id=1),
            ImportFailed(result="duplicate"),
        ]
