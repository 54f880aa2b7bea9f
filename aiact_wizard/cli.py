"""Command line entry point for the questionnaire."""

import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .engine import DatasetLoader, RealActionRunner, WizardEngine, WizardSettings
from .engine.errors import DecisionTreeError, HubChainLimitError

app = typer.Typer(help="EU AI Act compliance questionnaire.")


def _load_answers(path: Path) -> Dict[str, List[int]]:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a mapping of question id -> option indices")
    return {str(key): [int(index) for index in value] for key, value in data.items()}


@app.callback()
def main() -> None:
    """EU AI Act compliance questionnaire."""


@app.command()
def run(
    data_dir: Optional[Path] = typer.Option(None, help="Directory with the dataset files (default: $WIZARD_DATA_DIR or ./data)"),
    answers: Optional[Path] = typer.Option(None, exists=True, dir_okay=False, help="YAML file of scripted answers (headless mode)"),
    as_json: bool = typer.Option(False, "--json", help="Print the assessment as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Run the questionnaire and print the assessment."""
    settings = WizardSettings()
    if verbose:
        settings = settings.model_copy(update={'verbose': True})

    logging.basicConfig(
        level=logging.DEBUG if settings.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # With --json, stdout carries only the export document
    runner = RealActionRunner(verbose=settings.verbose, stream=sys.stderr if as_json else None)
    headless_inputs = _load_answers(answers) if answers else None

    try:
        datasets = DatasetLoader(base_path=data_dir or settings.data_dir).load()
        engine = WizardEngine(datasets, settings=settings)
        view = engine.run(runner, headless_inputs=headless_inputs)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as e:
        typer.echo(f"Error: could not load datasets: {e}", err=True)
        raise typer.Exit(code=1)
    except (DecisionTreeError, HubChainLimitError, ValueError) as e:
        # ValueError: headless script is missing or has an invalid answer
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if view is None:
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(engine.export_payload(), indent=2))


if __name__ == '__main__':
    app()
