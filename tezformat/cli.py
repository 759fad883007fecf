"""
tezformat CLI 入口

命令：
- format: 调用 LLM 将原始文本结构化为文档
- preview: 生成 HTML 预览
- export: 导出 Word 文档
- status: 查看文档内容块统计
- serve: 启动 Web 界面
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import create_structurer, load_config, load_document, save_document
from .errors import TezFormatError
from .log import setup_logging
from .models import ContentType
from .render import EXPORT_FILENAME, PreviewRenderer, WordExporter
from .session import FormatSession


app = typer.Typer(
    name="tezformat",
    help="tezformat - İYYÜ / APA 7 tez formatlayıcı",
    add_completion=False,
)

console = Console()


def _fail(error: TezFormatError) -> None:
    console.print(f"[red]✗ {error.user_message}[/red]")
    raise typer.Exit(code=1)


@app.command("format")
def format_text(
    input_file: Path = typer.Argument(
        ...,
        help="原始文本文件路径",
        exists=True,
    ),
    output_file: Path = typer.Option(
        Path("tez.yaml"),
        "--output", "-o",
        help="输出的 YAML 文档路径",
    ),
    preview_file: Optional[Path] = typer.Option(
        None,
        "--preview", "-p",
        help="同时生成 HTML 预览",
    ),
    docx_file: Optional[Path] = typer.Option(
        None,
        "--docx", "-d",
        help="同时导出 Word 文档",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    使用 AI 将原始文本结构化为论文文档

    示例:
        tezformat format notlar.txt -o tez.yaml -p tez.html -d tez.docx
    """
    config = load_config(env_file)
    setup_logging(config.log_level)

    raw_text = input_file.read_text(encoding="utf-8")
    session = FormatSession(structurer=create_structurer(config))

    console.print(Panel(
        "[bold]Tez Formatlayıcı[/bold]\n"
        f"输入文件: {input_file}\n"
        f"使用模型: {config.structuring_llm.model}",
        border_style="blue",
    ))

    try:
        with console.status("[cyan]AI 结构化中...[/cyan]"):
            document = asyncio.run(session.format_text(raw_text))
    except TezFormatError as e:
        _fail(e)

    save_document(document, output_file)
    console.print(f"[green]✓ 文档已保存到: {output_file}[/green]")

    if preview_file:
        PreviewRenderer().render_to_file(document, preview_file)
        console.print(f"[green]✓ 预览已生成: {preview_file}[/green]")

    if docx_file:
        try:
            WordExporter().export(document, docx_file)
        except TezFormatError as e:
            _fail(e)


@app.command("preview")
def preview(
    input_file: Path = typer.Argument(
        ...,
        help="YAML 文档路径",
        exists=True,
    ),
    output_file: Path = typer.Option(
        Path("onizleme.html"),
        "--output", "-o",
        help="输出的 HTML 文件路径",
    ),
) -> None:
    """
    生成 HTML 预览（A4 页面）
    """
    document = load_document(input_file)
    PreviewRenderer().render_to_file(document, output_file)
    console.print(f"[green]✓ 预览已生成: {output_file}[/green]")


@app.command("export")
def export(
    input_file: Path = typer.Argument(
        ...,
        help="YAML 文档路径",
        exists=True,
    ),
    output_file: Path = typer.Option(
        Path(EXPORT_FILENAME),
        "--output", "-o",
        help="输出的 Word 文件路径",
    ),
) -> None:
    """
    导出 Word 文档
    """
    document = load_document(input_file)
    if document.is_empty:
        console.print("[yellow]文档为空，没有可导出的内容[/yellow]")
        raise typer.Exit(code=1)
    try:
        WordExporter().export(document, output_file)
    except TezFormatError as e:
        _fail(e)


@app.command("status")
def status(
    input_file: Path = typer.Argument(
        ...,
        help="YAML 文档路径",
        exists=True,
    ),
) -> None:
    """
    查看文档内容块统计
    """
    document = load_document(input_file)

    table = Table(title=str(input_file))
    table.add_column("类型", style="cyan")
    table.add_column("数量", justify="right")

    for block_type, count in document.count_by_type().items():
        table.add_row(block_type.value, str(count))
    table.add_row("[bold]合计[/bold]", f"[bold]{len(document.blocks)}[/bold]")

    console.print(table)

    titles = [b.content for b in document.blocks if b.type is ContentType.TITLE]
    if titles:
        console.print(f"标题: [bold]{titles[0]}[/bold]")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="监听地址"),
    port: int = typer.Option(8000, "--port", help="监听端口"),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env", "-e",
        help=".env 配置文件路径",
    ),
) -> None:
    """
    启动 Web 界面（浏览器实时预览）
    """
    import uvicorn

    from .web import create_app

    config = load_config(env_file)
    setup_logging(config.log_level)

    console.print(f"[cyan]🌐 Web 界面: http://{host}:{port}[/cyan]")
    uvicorn.run(create_app(config=config), host=host, port=port)


if __name__ == "__main__":
    app()
