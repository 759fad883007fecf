"""
测试 Web 接口
"""

import asyncio
import io

import httpx
import pytest
import pytest_asyncio
from docx import Document as open_docx
from httpx import ASGITransport, AsyncClient

from tezformat.errors import FormatInProgressError
from tezformat.pipeline import DocumentStructurer
from tezformat.render import EXPORT_FILENAME
from tezformat.render.preview import EMPTY_PLACEHOLDER
from tezformat.session import FormatSession
from tezformat.web import create_app

from .conftest import SCENARIO_TABLE, SCENARIO_TITLE_PARAGRAPH, FailingProvider, FakeProvider


def make_client(provider) -> AsyncClient:
    session = FormatSession(structurer=DocumentStructurer(provider))
    app = create_app(session=session)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest_asyncio.fixture
async def client():
    async with make_client(FakeProvider(SCENARIO_TITLE_PARAGRAPH)) as c:
        yield c


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_index_shows_placeholder(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert EMPTY_PLACEHOLDER in resp.text
    assert "Formatla ve Yapılandır" in resp.text


@pytest.mark.asyncio
async def test_format_then_preview(client: AsyncClient):
    resp = await client.post("/api/format", json={"text": "ham metin"})
    assert resp.status_code == 200
    data = resp.json()
    assert [b["type"] for b in data["blocks"]] == ["TITLE", "PARAGRAPH"]
    assert data["can_export"] is True
    assert data["error"] is None
    assert "BAŞLIK" in data["preview"]

    preview = await client.get("/api/preview")
    assert "Bir paragraf." in preview.text

    document = await client.get("/api/document")
    assert document.json()["blocks"] == data["blocks"]


@pytest.mark.asyncio
async def test_blank_text_returns_422(client: AsyncClient):
    resp = await client.post("/api/format", json={"text": "   "})
    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "Lütfen önce metin giriniz."
    assert data["blocks"] == []


@pytest.mark.asyncio
async def test_structuring_failure_returns_502():
    async with make_client(FailingProvider(httpx.ConnectError("down"))) as c:
        resp = await c.post("/api/format", json={"text": "ham metin"})
        assert resp.status_code == 502
        data = resp.json()
        assert data["error"] == "Metin düzenlenirken bir hata oluştu. Lütfen tekrar deneyiniz."
        assert data["can_export"] is False
        assert "down" not in data["error"]


@pytest.mark.asyncio
async def test_export_empty_document(client: AsyncClient):
    resp = await client.post("/api/export")
    assert resp.status_code == 500
    assert resp.json()["error"] == "Dosya oluşturulurken hata meydana geldi."


@pytest.mark.asyncio
async def test_export_download():
    async with make_client(FakeProvider(SCENARIO_TABLE)) as c:
        await c.post("/api/format", json={"text": "tablo"})
        resp = await c.post("/api/export")

    assert resp.status_code == 200
    assert EXPORT_FILENAME in resp.headers["content-disposition"]
    doc = open_docx(io.BytesIO(resp.content))
    assert doc.paragraphs[0].text == "Tablo 1. Örnek"
    assert len(doc.tables[0].rows) == 2


@pytest.mark.asyncio
async def test_initial_document_and_preview(client: AsyncClient):
    resp = await client.get("/api/document")
    assert resp.status_code == 200
    data = resp.json()
    assert data["blocks"] == []
    assert data["can_export"] is False
    assert data["in_flight"] is False
    assert data["error"] is None
    assert EMPTY_PLACEHOLDER in data["preview"]

    preview = await client.get("/api/preview")
    assert preview.status_code == 200
    assert preview.headers["content-type"].startswith("text/html")
    assert EMPTY_PLACEHOLDER in preview.text


@pytest.mark.asyncio
async def test_concurrent_format_returns_409():
    provider = FakeProvider(SCENARIO_TITLE_PARAGRAPH)
    provider.gate = asyncio.Event()

    async with make_client(provider) as c:
        first = asyncio.create_task(c.post("/api/format", json={"text": "ilk"}))
        while not provider.calls:
            await asyncio.sleep(0)

        state = await c.get("/api/document")
        assert state.json()["in_flight"] is True

        resp = await c.post("/api/format", json={"text": "ikinci"})
        assert resp.status_code == 409
        assert resp.json()["error"] == FormatInProgressError.user_message

        provider.gate.set()
        done = await first

    assert done.status_code == 200
    assert [b["type"] for b in done.json()["blocks"]] == ["TITLE", "PARAGRAPH"]
    assert len(provider.calls) == 1
