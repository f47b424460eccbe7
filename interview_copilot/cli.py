import asyncio
from datetime import UTC, datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from interview_copilot.core.catalog import get_all_models, get_available_models
from interview_copilot.core.config import CopilotConfig
from interview_copilot.core.constants import DEFAULT_ROLE_TYPE
from interview_copilot.core.logging import init_logging, log_event, set_run_id
from interview_copilot.core.models import CanonicalResponse, RetrievedContext
from interview_copilot.core.pipeline import ResponsePipeline

app = typer.Typer(help="Interview Copilot - AI-generated answers to interview questions.")
console = Console()


def _init_logging_from_cli(log_level: str | None, log_file: str | None, log_format: str, log_mask: bool) -> None:
    # Logs go to stderr so answers on stdout stay clean
    init_logging(level=log_level, fmt=log_format, file_path=log_file, mask=log_mask, use_stderr=True)
    set_run_id(datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")[-12:])
    log_event("cli.start", component="cli", log_format=log_format, log_mask=log_mask)


def _render_response(response: CanonicalResponse) -> None:
    title = f"{response.provider} / {response.model}"
    style = "red" if response.is_error else "green"
    console.print(Panel(response.answer, title=title, border_style=style))
    for label, values in (
        ("Experience", response.experience_mentioned),
        ("Technologies", response.key_technologies),
        ("Follow-up topics", response.follow_up_topics),
    ):
        if values:
            console.print(f"[bold]{label}:[/bold] {', '.join(values)}")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Interview question to answer"),
    provider: str | None = typer.Option(None, help="AI provider (groq, gemini, openai, anthropic)"),
    model: str | None = typer.Option(None, help="Model id (default: provider default)"),
    role_type: str = typer.Option(DEFAULT_ROLE_TYPE, "--role-type", help="Role the candidate is interviewing for"),
    persona: str | None = typer.Option(None, help="Custom system prompt replacing the default persona"),
    resume: Path | None = typer.Option(None, exists=True, dir_okay=False, help="Resume text file used as context"),
    log_level: str | None = typer.Option(None, help="Log level (DEBUG, INFO, ...)"),
    log_file: str | None = typer.Option(None, help="Log file path (default stderr)"),
    log_format: str = typer.Option("text", help="Log format: json|text"),
    log_mask: bool = typer.Option(False, help="Mask question text in logs"),
):
    """
    Answer a single interview question and print the structured response.
    """
    _init_logging_from_cli(log_level, log_file, log_format, log_mask)
    config = CopilotConfig()
    context = RetrievedContext(resume=resume.read_text(encoding="utf-8")) if resume else None

    pipeline = ResponsePipeline.create(config)
    response = asyncio.run(
        pipeline.generate(
            question,
            provider=(provider or config.default_provider).lower(),
            model=model,
            role_type=role_type,
            context=context,
            persona=persona,
        )
    )
    _render_response(response)
    if response.is_error:
        raise typer.Exit(1)


@app.command()
def models(
    provider: str | None = typer.Option(None, help="Only list models for this provider"),
    log_level: str | None = typer.Option(None, help="Log level (DEBUG, INFO, ...)"),
    log_format: str = typer.Option("text", help="Log format: json|text"),
):
    """
    List the models available per provider.
    """
    _init_logging_from_cli(log_level, None, log_format, False)
    catalog = {provider: get_available_models(provider)} if provider else get_all_models()
    table = Table("Provider")
    table.add_column("Model", no_wrap=True)
    table.add_column("Speed")
    table.add_column("Max tokens")
    table.add_column("Best for")
    for name, entries in catalog.items():
        for entry in entries:
            table.add_row(name, entry.id, entry.speed, str(entry.max_tokens), ", ".join(entry.strengths))
    if not table.rows:
        typer.echo(f"No models known for provider '{provider}'.", err=True)
        raise typer.Exit(1)
    console.print(table)


@app.command()
def validate(
    provider: str = typer.Argument(..., help="Provider to validate"),
    api_key: str | None = typer.Option(None, "--api-key", help="Key to check (default: <PROVIDER>_API_KEY)"),
    log_level: str | None = typer.Option(None, help="Log level (DEBUG, INFO, ...)"),
    log_format: str = typer.Option("text", help="Log format: json|text"),
):
    """
    Check an API key with a minimal request to the provider.
    """
    _init_logging_from_cli(log_level, None, log_format, False)
    config = CopilotConfig()
    key = api_key or config.api_key(provider)
    if not key:
        typer.echo(f"No API key given and {provider.upper()}_API_KEY is not set.", err=True)
        raise typer.Exit(1)

    pipeline = ResponsePipeline.create(config)
    if asyncio.run(pipeline.validate_provider(provider, key)):
        typer.echo(f"{provider}: key is valid")
    else:
        typer.echo(f"{provider}: key validation failed", err=True)
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind the server to"),
    port: int = typer.Option(8080, help="Port to bind the server to"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
    log_level: str | None = typer.Option(None, help="Log level (DEBUG, INFO, ...)"),
    log_format: str = typer.Option("json", help="Log format: json|text"),
):
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    _init_logging_from_cli(log_level, None, log_format, False)
    typer.echo(f"Starting Interview Copilot API on {host}:{port} (docs at http://{host}:{port}/docs)")
    uvicorn.run(
        "interview_copilot.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=(log_level or "info").lower(),
    )


def main() -> None:
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
