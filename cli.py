# cli.py
import json
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text
from typing_extensions import Annotated

from app.core.settings import get_settings
from app.safety_plan.controller import SafetyPlanWizard
from app.safety_plan.errors import SafetyPlanError
from app.safety_plan.export import PlanExporter
from app.safety_plan.layout import entry_lines
from app.safety_plan.schemas import PlanSnapshot, SafetyPlan
from app.safety_plan.templates import SECTION_TEMPLATES

load_dotenv()

# Configure logging
logging.basicConfig(level=get_settings().LOG_LEVEL.value)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Crisis Safety Planner CLI application.")
console = Console()


def load_plan_file(path: Path) -> SafetyPlan:
    """Read a plan from JSON. Accepts a bare plan or a stored {timestamp, data} snapshot."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict) and "data" in raw and "timestamp" in raw:
        raw = raw["data"]
    return SafetyPlan.model_validate(raw)


@app.command(name="template")
def template_command(
    output: Annotated[Path, typer.Option(help="Where to write the empty plan JSON.")] = Path("safety-plan.json"),
):
    """
    Writes a fresh plan with empty entries, ready to be filled in and exported.
    """
    plan = SafetyPlan.seeded()
    output.write_text(plan.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    typer.echo(f"Wrote empty safety plan to '{output}'.")


@app.command(name="export")
def export_command(
    plan_file: Annotated[Path, typer.Argument(help="Plan JSON file to export.")],
    output_dir: Annotated[
        Path, typer.Option(help="Directory for the PDF. Defaults to EXPORT_DIR from settings.")
    ] = None,
):
    """
    Saves the plan to the local store and writes it as a PDF.
    """
    settings = get_settings()
    target_dir = output_dir or Path(settings.EXPORT_DIR)

    logger.info(f"Attempting to export plan file '{plan_file}' into '{target_dir}'...")
    try:
        plan = load_plan_file(plan_file)
    except FileNotFoundError:
        typer.echo(f"Error: File not found at '{plan_file}'.", err=True)
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Error: '{plan_file}' is not a valid safety plan: {e}", err=True)
        raise typer.Exit(code=1)

    wizard = SafetyPlanWizard(plan)
    try:
        result = wizard.finish(PlanExporter(settings))
        path = result.write_to(target_dir)
    except (SafetyPlanError, OSError) as e:
        typer.echo(f"An error occurred during export: {e}", err=True)
        logger.error(f"Export failed for file '{plan_file}': {e}", exc_info=True)
        raise typer.Exit(code=1)

    typer.echo(f"Safety Plan saved and written to '{path}'.")


@app.command(name="show")
def show_command():
    """
    Prints the most recently saved plan.
    """
    snapshot: PlanSnapshot = PlanExporter(get_settings()).load_last()
    if snapshot is None:
        typer.echo("No saved safety plan found.", err=True)
        raise typer.Exit(code=1)

    console.print(f"[bold]Saved at[/bold] {snapshot.timestamp}")
    for step, template in enumerate(SECTION_TEMPLATES, start=1):
        table = Table(title=f"STEP {step}: {template.title}", title_justify="left", show_header=False)
        table.add_column("entry")
        for ordinal, entry in enumerate(snapshot.data.section(template.key), start=1):
            table.add_row(Text("\n".join(entry_lines(template.entry_format, ordinal, entry))))
        console.print(table)


if __name__ == "__main__":
    app()
