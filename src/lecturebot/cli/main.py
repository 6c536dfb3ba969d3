"""
CLI Main - Typer command-line interface.
========================================

Commands:
- serve: Run the Kakao skill webhook
- ask: Ask a question locally through the full pipeline
- info: Show effective configuration
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lecturebot.shared.logging import get_logger

logger = get_logger(__name__)

app = typer.Typer(
    name="lecturebot",
    help="""LectureBot - lecture-grounded RAG answers for Kakao i Open Builder

COMMANDS OVERVIEW:

  serve    Run the skill webhook (POST /api/chat)
  ask      Ask a question through the full pipeline
  info     Show configuration and credential status

QUICK START:

  lecturebot info
  lecturebot ask "환불 정책이 어떻게 되나요?"
  lecturebot serve --port 8000
""",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def _load_settings(config: Optional[Path]):
    from lecturebot.shared.config import get_settings, load_settings

    if config is None:
        return get_settings()

    if not config.exists():
        console.print(f"[red]Config file not found: {config}[/red]")
        raise typer.Exit(1)
    return load_settings(config)


# ─────────────────────────────────────────────────────────────────────────────
# Serve Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Bind address (default from config).",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port", "-p",
        help="Port to listen on (default from config).",
    ),
    reload: bool = typer.Option(
        False,
        "--reload",
        help="Reload on code changes (development only).",
    ),
):
    """
    Run the Kakao skill webhook with uvicorn.

    Examples:
        lecturebot serve
        lecturebot serve --port 3000 --reload
    """
    import uvicorn

    from lecturebot.shared.config import get_settings

    settings = get_settings()
    bind_host = host or settings.server.host
    bind_port = port or settings.server.port

    console.print(Panel(
        f"[bold]Skill webhook[/bold]\n"
        f"Listening: http://{bind_host}:{bind_port}{settings.server.path}",
        title="LectureBot",
    ))

    uvicorn.run(
        "lecturebot.app.server:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.get_effective_log_level().lower(),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Ask Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def ask(
    question: str = typer.Argument(
        ...,
        help="Question about the lectures (wrap in quotes).",
    ),
    top_k: Optional[int] = typer.Option(
        None,
        "--top-k", "-k",
        min=1,
        help="Number of passages to retrieve (default from config).",
    ),
    show_sources: bool = typer.Option(
        False,
        "--sources/--no-sources",
        help="Display the passages the answer was grounded on.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Alternative settings.yaml.",
    ),
):
    """
    Ask a question through the full pipeline.

    Runs exactly what the webhook runs: embed, retrieve, compose.

    Examples:
        lecturebot ask "환불 정책이 어떻게 되나요?"
        lecturebot ask "캠페인 예산은 어떻게 설정하나요?" -k 5 --sources
    """
    from lecturebot.rag.pipeline import RAGPipeline

    settings = _load_settings(config)
    if top_k is not None:
        settings = settings.model_copy(update={"top_k": top_k})

    pipeline = RAGPipeline.from_settings(settings)

    console.print(f"\n[bold]Question:[/bold] {question}\n")
    with console.status("Thinking..."):
        result = pipeline.answer(question)

    console.print(Panel(result.text, title=f"Answer ({result.outcome.value})"))

    if show_sources and result.chunks:
        table = Table(title="Sources")
        table.add_column("#", justify="right")
        table.add_column("Source")
        table.add_column("Score", justify="right")
        table.add_column("Content")

        for i, chunk in enumerate(result.chunks, 1):
            score = f"{chunk.score:.3f}" if chunk.score is not None else "-"
            table.add_row(str(i), chunk.source or "-", score, chunk.content[:120])

        console.print(table)


# ─────────────────────────────────────────────────────────────────────────────
# Info Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def info():
    """
    Show effective configuration.

    Credentials are masked.
    """
    from lecturebot import __version__
    from lecturebot.indexing.embeddings_gemini import GeminiEmbeddingProvider
    from lecturebot.indexing.vector_store import SupabaseVectorStore
    from lecturebot.shared.config import DEFAULT_CONFIG_FILE, get_settings
    from lecturebot.shared.utils import mask_secret

    settings = get_settings()

    console.print(Panel(
        f"[bold]LectureBot[/bold]\n"
        f"Version: {__version__}\n"
        f"Config: {DEFAULT_CONFIG_FILE}",
        title="Info",
    ))

    table = Table(title="Configuration")
    table.add_column("Setting")
    table.add_column("Value")

    threshold = settings.get_effective_threshold()
    rows = [
        ("GEMINI_API_KEY", mask_secret(settings.gemini_api_key)),
        ("SUPABASE_URL", settings.supabase_url or "(not set)"),
        ("SUPABASE_SERVICE_KEY", mask_secret(settings.supabase_service_key)),
        ("Embedding model", settings.embeddings.model_name),
        ("Generation model", settings.generation.model_name),
        ("Temperature", str(settings.generation.temperature)),
        ("Max output tokens", str(settings.generation.max_output_tokens)),
        ("Top-k", str(settings.get_effective_top_k())),
        ("Similarity threshold", "off" if threshold is None else str(threshold)),
        ("Max attempts", str(settings.resilience.max_attempts)),
        ("Webhook path", settings.server.path),
    ]
    for name, value in rows:
        table.add_row(name, value)

    console.print(table)

    # Providers are built lazily, so no remote call is made here
    providers = Table(title="Providers")
    providers.add_column("Component")
    providers.add_column("Setting")
    providers.add_column("Value")

    components = [
        ("Embeddings", GeminiEmbeddingProvider(settings).get_info()),
        ("Vector store", SupabaseVectorStore(settings).get_info()),
    ]
    for component, details in components:
        for key, value in details.items():
            providers.add_row(component, key, str(value))

    console.print(providers)


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def cli():
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
