"""Command-line interface for Prompt Brief."""

import asyncio
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from prompt_brief import __version__
from prompt_brief.config import DEFAULT_SCHEMA, configure_logging, get_settings
from prompt_brief.models import BriefExtractionResult, StageProgress
from prompt_brief.pipeline import BriefInputError, evaluate_stage_progress, extract_brief

app = typer.Typer(
    name="prompt-brief",
    help="Prompt Brief - turn a conversation into a scored brief and check readiness",
    add_completion=False,
)
# Summaries go to stderr so stdout stays pipeable JSON
console = Console(stderr=True)


@app.command()
def extract(
    input_path: Path = typer.Argument(
        ...,
        help="Transcript text file, or a JSON list of {role, content} messages with --messages",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    messages: bool = typer.Option(
        False,
        "--messages",
        "-m",
        help="Treat the input file as a JSON message list",
    ),
    use_model: bool = typer.Option(
        False,
        "--model",
        help="Ask the configured Ollama model to assist normalization",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the JSON result to this file instead of stdout",
    ),
    pretty: bool = typer.Option(
        True,
        "--pretty/--compact",
        help="Pretty-print JSON output",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Extract a brief and evaluate stage progress for one conversation."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else "WARNING", json_output=settings.log_json)

    use_model = use_model or settings.use_model

    try:
        raw = input_path.read_text(encoding="utf-8")
        if messages:
            transcript, history = None, json.loads(raw)
        else:
            transcript, history = raw, None

        model_call = None
        if use_model:
            from prompt_brief.llm import create_model_call

            model_call = create_model_call()

        result = asyncio.run(
            extract_brief(
                transcript=transcript,
                messages=history,
                model_call=model_call,
                model_timeout=settings.normalizer_timeout_seconds,
            )
        )
    except (BriefInputError, json.JSONDecodeError, UnicodeDecodeError) as e:
        console.print(f"[red]Invalid input:[/red] {e}")
        sys.exit(2)

    progress = evaluate_stage_progress(result.fields)
    payload = {
        "brief": result.model_dump(mode="json", by_alias=True),
        "stageProgress": progress.model_dump(mode="json", by_alias=True),
    }
    rendered = json.dumps(payload, indent=2 if pretty else None, ensure_ascii=False)

    _display_summary(result, progress)

    if output is None:
        typer.echo(rendered)
    else:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"\n[green]Result saved to:[/green] {output}")


@app.command()
def stages() -> None:
    """Display the configured stages and their completion rules."""
    table = Table(title="Stages")
    table.add_column("Key")
    table.add_column("Label")
    table.add_column("Required", justify="center")
    table.add_column("Completion rules")

    for stage in DEFAULT_SCHEMA.stages:
        rules = []
        for rule_set in stage.completion_rules:
            clauses = []
            if rule_set.all_of:
                clauses.append("all(" + ", ".join(
                    f"{t.field_key.value}>={t.min_confidence}" for t in rule_set.all_of
                ) + ")")
            if rule_set.any_of:
                clauses.append("any(" + ", ".join(
                    f"{t.field_key.value}>={t.min_confidence}" for t in rule_set.any_of
                ) + ")")
            rules.append(" and ".join(clauses) or "always")
        table.add_row(stage.key, stage.label, "yes" if stage.required else "no", " | ".join(rules))

    console.print(table)


@app.command()
def info() -> None:
    """Display system information and configuration."""
    from prompt_brief.llm import get_llm_settings

    settings = get_settings()
    llm_settings = get_llm_settings()

    console.print(
        Panel.fit(
            "[bold blue]Prompt Brief[/bold blue]",
            border_style="blue",
        )
    )

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("Version", __version__)
    table.add_row("Fields", ", ".join(key.value for key in DEFAULT_SCHEMA.field_keys))
    table.add_row("Required stages", ", ".join(DEFAULT_SCHEMA.required_stage_keys))
    table.add_row("Model assistance", "on" if settings.use_model else "off")
    table.add_row("LLM Model", llm_settings.model_name)
    table.add_row("Ollama URL", llm_settings.ollama_base_url)
    table.add_row("Model timeout", str(settings.normalizer_timeout_seconds or llm_settings.request_timeout))

    console.print(table)


def _display_summary(result: BriefExtractionResult, progress: StageProgress) -> None:
    """Display extracted fields and readiness."""
    table = Table(title=f"Brief ({result.normalization_method.value})")
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_column("Confidence", justify="right")
    table.add_column("Source")

    for key, field_result in result.fields.items():
        table.add_row(
            key.value,
            field_result.value or "[dim]-[/dim]",
            f"{field_result.confidence:.2f}",
            field_result.source.value,
        )
    console.print(table)

    for conflict in result.unresolved_conflicts:
        console.print(f"[yellow]Conflict[/yellow] {conflict.field.value}: {conflict.reason}")

    status = "[green]ready[/green]" if progress.can_generate_final_prompt else "[red]not ready[/red]"
    console.print(
        f"\n[bold]Readiness:[/bold] {status} "
        f"({progress.completed_required}/{progress.required_total} required, "
        f"overall {progress.overall_completeness:.0%})"
    )
    for item in progress.missing_required_items:
        console.print(f"  [dim]{item.label}:[/dim] {item.follow_up_question}")


if __name__ == "__main__":
    app()
