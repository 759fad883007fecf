"""
测试 Word 导出（重新打开生成的 .docx 检查结构与格式）
"""

import io

import pytest
from docx import Document as open_docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt, Twips

from tezformat.errors import ExportFailure
from tezformat.models import ContentBlock, ContentType, Document
from tezformat.render.rules import cm_to_twips
from tezformat.render.word import EXPORT_FILENAME, HEADER_FILL, WordExporter


def _reopen(data: bytes):
    return open_docx(io.BytesIO(data))


def _body_tags(doc) -> list[str]:
    """正文中的顶层节点（段落 p / 表格 tbl），不含分节属性"""
    tags = []
    for child in doc.element.body.iterchildren():
        if child.tag == qn("w:p"):
            tags.append("p")
        elif child.tag == qn("w:tbl"):
            tags.append("tbl")
    return tags


def test_fixed_filename():
    assert EXPORT_FILENAME == "duzenlenmis_tez_taslagi.docx"


def test_page_layout():
    doc = _reopen(WordExporter().render_bytes(Document(blocks=(
        ContentBlock(type=ContentType.PARAGRAPH, content="x"),
    ))))
    section = doc.sections[0]
    assert section.top_margin == Twips(cm_to_twips(3))
    assert section.bottom_margin == Twips(cm_to_twips(3))
    assert section.left_margin == Twips(cm_to_twips(4))
    assert section.right_margin == Twips(cm_to_twips(2.5))
    assert section.page_width == Twips(cm_to_twips(21))


def test_body_holds_only_rendered_nodes():
    document = Document(blocks=(
        ContentBlock(type=ContentType.HEADING, content="GİRİŞ"),
        ContentBlock(type=ContentType.PARAGRAPH, content="Metin."),
    ))
    doc = _reopen(WordExporter().render_bytes(document))
    assert _body_tags(doc) == ["p", "p"]
    assert [p.text for p in doc.paragraphs] == ["GİRİŞ", "Metin."]


def test_title_and_paragraph(title_paragraph_document):
    doc = _reopen(WordExporter().render_bytes(title_paragraph_document))
    assert _body_tags(doc) == ["p", "p"]

    title, paragraph = doc.paragraphs
    assert title.text == "BAŞLIK"
    assert title.alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert title.paragraph_format.line_spacing == 1.5
    assert title.runs[0].bold is True

    assert paragraph.text == "Bir paragraf."
    assert paragraph.alignment == WD_ALIGN_PARAGRAPH.JUSTIFY
    assert paragraph.paragraph_format.first_line_indent == Twips(709)
    assert paragraph.runs[0].bold is False

    for p in (title, paragraph):
        run = p.runs[0]
        assert run.font.name == "Times New Roman"
        assert run.font.size == Pt(12)


def test_line_spacing_written_in_twips():
    document = Document(blocks=(
        ContentBlock(type=ContentType.PARAGRAPH, content="p"),
        ContentBlock(type=ContentType.BLOCK_QUOTE, content="q"),
    ))
    doc = _reopen(WordExporter().render_bytes(document))
    paragraph, quote = doc.paragraphs
    assert paragraph._p.pPr.spacing.get(qn("w:line")) == "360"
    assert quote._p.pPr.spacing.get(qn("w:line")) == "480"
    assert quote.paragraph_format.left_indent == Twips(cm_to_twips(0.5))
    assert quote.paragraph_format.right_indent == Twips(cm_to_twips(0.5))


def test_table_is_caption_then_table(table_document):
    doc = _reopen(WordExporter().render_bytes(table_document))
    assert _body_tags(doc) == ["p", "tbl"]

    caption = doc.paragraphs[0]
    assert caption.text == "Tablo 1. Örnek"
    assert caption.runs[0].bold is True

    table = doc.tables[0]
    assert len(table.rows) == 2
    assert [c.text for c in table.rows[0].cells] == ["A", "B"]
    assert [c.text for c in table.rows[1].cells] == ["1", "2"]

    for cell in table.rows[0].cells:
        assert cell.paragraphs[0].runs[0].bold is True
        shading = cell._tc.tcPr.find(qn("w:shd"))
        assert shading is not None
        assert shading.get(qn("w:fill")) == HEADER_FILL
    for cell in table.rows[1].cells:
        assert cell.paragraphs[0].runs[0].bold is False
        assert cell._tc.tcPr.find(qn("w:shd")) is None
        assert cell.paragraphs[0].paragraph_format.line_spacing == 1.0


def test_zero_row_table_emits_caption_only():
    document = Document(blocks=(
        ContentBlock(type=ContentType.TABLE, content="Tablo 2."),
        ContentBlock(type=ContentType.PARAGRAPH, content="sonra"),
    ))
    doc = _reopen(WordExporter().render_bytes(document))
    assert _body_tags(doc) == ["p", "p"]
    assert doc.tables == []


def test_ragged_rows_are_padded():
    document = Document(blocks=(
        ContentBlock(type=ContentType.TABLE, content="", table_rows=[["A", "B", "C"], ["1"]]),
    ))
    table = _reopen(WordExporter().render_bytes(document)).tables[0]
    assert [c.text for c in table.rows[1].cells] == ["1", "", ""]


def test_order_preserved(full_document):
    doc = _reopen(WordExporter().render_bytes(full_document))
    assert _body_tags(doc) == ["p", "p", "p", "p", "p", "p", "p", "tbl", "p", "p"]
    texts = [p.text for p in doc.paragraphs]
    assert texts[0] == "KITLE İLETIŞIM KURAMLARI"
    assert texts[-1] == "Sonuç paragrafı."


def test_list_item_uses_bullet_style():
    document = Document(blocks=(ContentBlock(type=ContentType.LIST_ITEM, content="madde"),))
    paragraph = _reopen(WordExporter().render_bytes(document)).paragraphs[0]
    assert paragraph.style.name == "List Bullet"
    assert paragraph.alignment == WD_ALIGN_PARAGRAPH.JUSTIFY


def test_export_is_deterministic_in_structure(full_document):
    exporter = WordExporter()
    first = _reopen(exporter.render_bytes(full_document))
    second = _reopen(exporter.render_bytes(full_document))
    assert _body_tags(first) == _body_tags(second)
    assert [p.text for p in first.paragraphs] == [p.text for p in second.paragraphs]


def test_assembly_error_becomes_export_failure():
    document = Document(blocks=(ContentBlock(type=ContentType.PARAGRAPH, content="bozuk \x00 metin"),))
    with pytest.raises(ExportFailure):
        WordExporter().render_bytes(document)


def test_export_failure_leaves_no_file(tmp_path, monkeypatch, full_document):
    exporter = WordExporter()

    def broken_build(document):
        raise RuntimeError("builder exploded")

    monkeypatch.setattr(exporter, "build", broken_build)
    target = tmp_path / EXPORT_FILENAME
    with pytest.raises(ExportFailure):
        exporter.export(full_document, target)
    assert list(tmp_path.iterdir()) == []


def test_export_writes_file(tmp_path, full_document):
    target = WordExporter().export(full_document, tmp_path / EXPORT_FILENAME)
    assert target.exists()
    assert [p.name for p in tmp_path.iterdir()] == [EXPORT_FILENAME]
    assert len(_reopen(target.read_bytes()).tables) == 1


@pytest.mark.asyncio
async def test_export_async(table_document):
    data = await WordExporter().export_async(table_document)
    assert len(_reopen(data).tables) == 1
