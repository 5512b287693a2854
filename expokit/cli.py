from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .config import ConfigError
from .scaffold import (
    CopyError,
    DirectoryCreationError,
    FileStatus,
    InvalidProjectNameError,
    ScaffoldCancelled,
    ScaffoldOptions,
    ScaffoldReport,
    scaffold_project,
)

app = typer.Typer(help="Copy an Expo app template into a new project and rename its placeholders.")
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

COMMAND = "copy"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2

STATUS_STYLES = {
    FileStatus.rewritten: "green",
    FileStatus.unchanged: "cyan",
    FileStatus.missing: "yellow",
    FileStatus.failed: "red",
}


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    md = "md"


def _json_print(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=True, sort_keys=True))


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _emit_success(
    output_format: OutputFormat,
    data: dict,
    md_renderer: Callable[[dict], str],
    table_renderer: Callable[[dict], None],
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": True,
                "command": COMMAND,
                "exit_code": EXIT_OK,
                "data": data,
            }
        )
    elif output_format == OutputFormat.md:
        console.print(md_renderer(data))
    else:
        table_renderer(data)


def _emit_error(
    output_format: OutputFormat,
    exit_code: int,
    code: str,
    message: str,
    data: dict | None = None,
) -> None:
    if output_format == OutputFormat.json:
        payload = {
            "ok": False,
            "command": COMMAND,
            "exit_code": exit_code,
            "error": {
                "code": code,
                "message": message,
            },
        }
        if data is not None:
            payload["data"] = data
        _json_print(payload)
    elif output_format == OutputFormat.md:
        console.print(f"# {COMMAND}\n\n- **status**: error\n- **code**: {code}\n- **message**: {message}")
    else:
        console.print(f"\n[red]❌ {message}[/red]")

    raise typer.Exit(code=exit_code)


def _next_steps(destination: Path) -> list[str]:
    return [
        f"cd '{destination}'",
        "npm install  (or: yarn install)",
        "git init",
    ]


def _report_data(report: ScaffoldReport) -> dict:
    return {
        "source": str(report.source),
        "destination": str(report.destination),
        "created": report.created,
        "name": report.display_name,
        "slug": report.slug,
        "copied": report.copied,
        "files": [
            {
                "file": outcome.name,
                "status": outcome.status.value,
                "replacements": outcome.replacements,
                "message": outcome.message,
            }
            for outcome in report.files
        ],
        "next_steps": _next_steps(report.destination),
    }


def render_md(payload: dict) -> str:
    lines = [f"# Project created: `{payload['destination']}`", ""]
    lines.append(f"- **name**: {payload['name']}")
    lines.append(f"- **slug**: `{payload['slug']}`")
    lines.append(f"- **copied**: {payload['copied']} file(s)")
    lines.append("\n## Placeholders")
    for item in payload["files"]:
        detail = f" ({item['message']})" if item["message"] else ""
        lines.append(f"- `{item['file']}` | `{item['status']}` | {item['replacements']}{detail}")
    lines.append("\n## Next steps")
    lines.extend(f"{index}. `{step}`" for index, step in enumerate(payload["next_steps"], start=1))
    return "\n".join(lines)


def render_table(payload: dict) -> None:
    console.print(f"[cyan]Derived App Name:[/cyan] \"{payload['name']}\"")
    console.print(f"[cyan]Derived App Slug:[/cyan] \"{payload['slug']}\"")

    table = Table(title="Placeholders")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Replacements", justify="right")
    for item in payload["files"]:
        style = STATUS_STYLES[FileStatus(item["status"])]
        table.add_row(item["file"], f"[{style}]{item['status']}[/{style}]", str(item["replacements"]))
    console.print(table)

    for item in payload["files"]:
        if item["message"]:
            console.print(f"[yellow]Warning:[/yellow] {item['message']}")

    console.print("\n[green]✨ Template setup complete! ✨[/green]")
    console.print("Next steps:")
    for index, step in enumerate(payload["next_steps"], start=1):
        console.print(f"{index}. [cyan]{step}[/cyan]")


def _prompt_confirm(output_format: OutputFormat) -> Callable[[str], bool]:
    to_stderr = output_format == OutputFormat.json

    def confirm(prompt: str) -> bool:
        (err_console if to_stderr else console).print(f"[yellow]Warning:[/yellow] {prompt}")
        reply = typer.prompt("Continue? (y/N)", default="N", show_default=False, err=to_stderr)
        # Only the first character counts, as with a single-key read.
        return reply.strip()[:1] in ("y", "Y")

    return confirm


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command()
def copy(
    destination: Path = typer.Argument(..., help="Path of the new project, e.g. ../new-awesome-app"),
    source: Path = typer.Option(Path("."), "--source", "-s", help="Template directory to copy from."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Reuse an existing destination without asking."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every copied file and substitution."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
):
    """Copy the template into DESTINATION and rewrite its slug placeholders."""
    _configure_logging(verbose)

    confirm = (lambda _prompt: True) if yes else _prompt_confirm(output_format)
    options = ScaffoldOptions(destination=destination, source_root=source, confirm=confirm)

    try:
        report = scaffold_project(options)
    except InvalidProjectNameError as error:
        _emit_error(output_format, EXIT_INVALID_INPUT, "invalid_project_name", str(error))
        raise
    except ScaffoldCancelled as error:
        _emit_error(output_format, EXIT_ERROR, "cancelled", str(error))
        raise
    except DirectoryCreationError as error:
        _emit_error(output_format, EXIT_ERROR, "directory_error", str(error))
        raise
    except CopyError as error:
        _emit_error(output_format, EXIT_ERROR, "copy_error", str(error))
        raise
    except ConfigError as error:
        _emit_error(output_format, EXIT_ERROR, "config_error", str(error))
        raise

    data = _report_data(report)
    if not report.ok:
        if output_format == OutputFormat.table:
            for outcome in report.warnings:
                console.print(f"[yellow]Warning:[/yellow] {outcome.name}: {outcome.message}")
        _emit_error(
            output_format,
            EXIT_ERROR,
            "placeholder_error",
            "An error occurred during the placeholder replacement process. Please check warnings above.",
            data=data,
        )

    _emit_success(output_format, data, md_renderer=render_md, table_renderer=render_table)


if __name__ == "__main__":
    app()
