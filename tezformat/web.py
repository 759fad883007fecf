"""
Web 界面

单页应用：左侧输入原始文本，右侧实时显示 A4 预览，可下载 .docx
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from jinja2 import Environment
from pydantic import BaseModel, Field

from .config import AppConfig, create_structurer, load_config
from .errors import (
    ExportFailure,
    FormatInProgressError,
    InputValidationError,
    StructuringFailure,
    TezFormatError,
)
from .render import EXPORT_FILENAME
from .session import FormatSession


logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_ERROR_STATUS: dict[type[TezFormatError], int] = {
    InputValidationError: 422,
    FormatInProgressError: 409,
    StructuringFailure: 502,
    ExportFailure: 500,
}


class FormatRequest(BaseModel):
    text: str = Field(default="", description="原始文本")


class DocumentState(BaseModel):
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    preview: str = ""
    can_export: bool = False
    in_flight: bool = False
    error: str | None = None


INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="tr">
<head>
<meta charset="utf-8">
<title>Tez Formatlayıcı (İYYÜ / APA 7)</title>
<style>
  body { margin:0; font-family:sans-serif; display:flex; flex-direction:column; height:100vh; }
  header { padding:1rem 1.5rem; border-bottom:1px solid #e5e7eb; display:flex; justify-content:space-between; align-items:center; }
  header h1 { font-size:1.25rem; margin:0; }
  header p { font-size:0.75rem; color:#6b7280; margin:0; }
  main { flex:1; display:flex; overflow:hidden; }
  #input-panel { width:25%; min-width:18rem; padding:1rem; display:flex; flex-direction:column; border-right:1px solid #e5e7eb; }
  #raw-text { flex:1; resize:none; padding:1rem; border:1px solid #d1d5db; border-radius:0.75rem; background:#f9fafb; }
  #error { margin-top:1rem; padding:0.75rem; background:#fef2f2; color:#b91c1c; border-radius:0.5rem; font-size:0.875rem; }
  #format-btn { margin-top:1rem; padding:0.75rem; border:0; border-radius:0.75rem; background:#2563eb; color:white; font-weight:600; }
  #format-btn:disabled { background:#93c5fd; cursor:wait; }
  #export-btn { padding:0.5rem 1rem; border:0; border-radius:0.5rem; background:#16a34a; color:white; }
  #preview { flex:1; overflow-y:auto; background:#f3f4f6; display:flex; justify-content:center; padding:2rem 0; }
</style>
</head>
<body>
<header>
  <div>
    <h1>Tez Formatlayıcı (İYYÜ / APA 7)</h1>
    <p>Akıllı Yapılandırma • Times New Roman 12pt • APA 7 Kuralları</p>
  </div>
  <button id="export-btn" {% if not state.can_export %}hidden{% endif %}>.DOCX İndir</button>
</header>
<main>
  <section id="input-panel">
    <label for="raw-text"><b>Ham Metin</b></label>
    <textarea id="raw-text" spellcheck="false"
      placeholder="Hiçbir başlık veya paragraf düzeni olmayan, karışık notlarınızı veya ham metinlerinizi buraya yapıştırın."></textarea>
    <div id="error" {% if not state.error %}hidden{% endif %}>{{ state.error or "" }}</div>
    <button id="format-btn" disabled>Formatla ve Yapılandır</button>
  </section>
  <section id="preview">{{ state.preview | safe }}</section>
</main>
<script>
const text = document.getElementById("raw-text");
const formatBtn = document.getElementById("format-btn");
const exportBtn = document.getElementById("export-btn");
const errorBox = document.getElementById("error");
const preview = document.getElementById("preview");
let busy = false;

function refreshButtons() { formatBtn.disabled = busy || !text.value.trim(); }
function showError(message) { errorBox.textContent = message || ""; errorBox.hidden = !message; }
function applyState(state) {
  preview.innerHTML = state.preview;
  exportBtn.hidden = !state.can_export;
  showError(state.error);
}

text.addEventListener("input", refreshButtons);

formatBtn.addEventListener("click", async () => {
  if (busy) return;
  busy = true; refreshButtons();
  formatBtn.textContent = "Yeniden Yapılandırılıyor...";
  try {
    const resp = await fetch("/api/format", {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify({text: text.value}),
    });
    applyState(await resp.json());
  } catch (err) {
    showError("Metin düzenlenirken bir hata oluştu. Lütfen tekrar deneyiniz.");
  } finally {
    busy = false; refreshButtons();
    formatBtn.textContent = "Formatla ve Yapılandır";
  }
});

exportBtn.addEventListener("click", async () => {
  const resp = await fetch("/api/export", {method: "POST"});
  if (!resp.ok) { applyState(await resp.json()); return; }
  const blob = await resp.blob();
  const link = document.createElement("a");
  link.href = URL.createObjectURL(blob);
  link.download = "{{ filename }}";
  link.click();
  URL.revokeObjectURL(link.href);
  showError(null);
});
</script>
</body>
</html>
"""


def _state(session: FormatSession) -> DocumentState:
    return DocumentState(
        blocks=session.document.to_payload(),
        preview=session.preview(),
        can_export=session.can_export,
        in_flight=session.in_flight,
        error=session.error,
    )


def create_app(
    session: FormatSession | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        session: 格式化会话（测试时可注入）
        config: 应用配置，未提供 session 时用于创建结构化器

    Returns:
        FastAPI 实例
    """
    if session is None:
        config = config or load_config()
        session = FormatSession(structurer=create_structurer(config))

    app = FastAPI(title="Tez Formatlayıcı")
    app.state.session = session
    index_template = Environment(autoescape=True).from_string(INDEX_TEMPLATE)

    @app.exception_handler(TezFormatError)
    async def handle_error(request: Request, exc: TezFormatError) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), 500)
        state = _state(session).model_dump()
        state["error"] = exc.user_message
        return JSONResponse(status_code=status_code, content=state)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        html = index_template.render(state=_state(session), filename=EXPORT_FILENAME)
        return HTMLResponse(html)

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/document", response_model=DocumentState)
    async def get_document() -> DocumentState:
        return _state(session)

    @app.get("/api/preview", response_class=HTMLResponse)
    async def get_preview() -> HTMLResponse:
        return HTMLResponse(session.preview())

    @app.post("/api/format", response_model=DocumentState)
    async def format_text(request: FormatRequest) -> DocumentState:
        await session.format_text(request.text)
        return _state(session)

    @app.post("/api/export")
    async def export_docx() -> Response:
        data = await session.export_docx()
        return Response(
            content=data,
            media_type=DOCX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    return app
