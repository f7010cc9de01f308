from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .calculator import calculate_sample_size, effect_size_label
from .config import build_suggestion_config, build_wizard_config, configure_logging, load_config
from .export import render_markdown
from .review import run_design_review
from .state import ExperimentState
from .steps import assignment_preview
from .suggestions import SUGGESTION_KINDS, SuggestionClient, build_provider

app = typer.Typer(help="Experiment Wizard CLI")


def _client(config_path: Optional[Path], offline: bool = False) -> SuggestionClient:
    cfg = load_config(config_path)
    configure_logging(cfg)
    suggestion_cfg = build_suggestion_config(cfg)
    if offline:
        suggestion_cfg = replace(suggestion_cfg, provider="offline")
    return SuggestionClient(build_provider(suggestion_cfg))


def load_experiment(path: Path) -> ExperimentState:
    """Read an experiment record from a YAML or JSON file."""
    with open(path, "r", encoding="utf-8") as handle:
        if path.suffix.lower() == ".json":
            data = json.load(handle)
        else:
            data = yaml.safe_load(handle) or {}
    return ExperimentState.from_dict(data)


@app.command("sample-size")
def sample_size_cmd(
    mde: float = typer.Option(0.2, help="Minimum detectable effect (0.1, 0.2 or 0.5)."),
    power: float = typer.Option(0.8, help="Statistical power."),
    alpha: float = typer.Option(0.05, help="Significance level."),
    experiment_type: Optional[str] = typer.Option(None, "--type", help="mab, cmab or bayesian_ab."),
) -> None:
    """Heuristic total sample size for the calculator inputs."""
    size = calculate_sample_size(mde, power, alpha, experiment_type)
    typer.echo(f"Sample size: {size}")
    typer.echo(f"Expected effect: {effect_size_label(mde)}")


@app.command()
def suggest(
    kind: str = typer.Argument(..., help="title, sample_size, randomization or variables."),
    domain: str = typer.Option("default", help="Experiment domain."),
    focus: str = typer.Option("", help="Focus of the experiment (title suggestions)."),
    experiment_type: Optional[str] = typer.Option(None, "--type", help="mab, cmab or bayesian_ab."),
    title: Optional[str] = typer.Option(None, help="Experiment title (variable suggestions)."),
    mde: float = typer.Option(0.2, help="MDE used for the expected effect (sample size)."),
    sample_size: Optional[int] = typer.Option(None, help="Sample size (randomization)."),
    variables: Optional[List[str]] = typer.Option(None, "--variable", help="Known variables (randomization)."),
    offline: bool = typer.Option(False, help="Skip the model and print the static default."),
    config_path: Optional[Path] = typer.Option(None, exists=True, help="Project config."),
) -> None:
    """Ask the generative model for a suggestion."""
    if kind not in SUGGESTION_KINDS:
        typer.echo(f"Unknown suggestion kind: {kind}", err=True)
        raise typer.Exit(code=1)
    params = {
        "domain": domain,
        "focus": focus,
        "experiment_type": experiment_type,
        "title": title,
        "expected_effect": effect_size_label(mde),
        "sample_size": sample_size,
        "variables": variables or None,
        "clusters": None,
    }
    result = _client(config_path, offline).request_suggestion(kind, params)
    if isinstance(result.suggestion, list):
        for item in result.suggestion:
            typer.echo(f"- {item}")
    else:
        typer.echo(f"Suggestion: {result.suggestion}")
    typer.echo(f"Why: {result.explanation}")
    if result.is_fallback:
        typer.echo("(static default)")


@app.command()
def ratio(
    value: str = typer.Argument("", help="Custom ratio such as 2:1:1; empty means equal."),
    groups: int = typer.Option(2, min=2, max=5, help="Number of treatment groups."),
) -> None:
    """Preview the assignment shares for a ratio."""
    preview = assignment_preview("custom" if value else "equal", value, groups)
    if not preview.is_valid:
        typer.echo(preview.placeholder, err=True)
        raise typer.Exit(code=1)
    for segment in preview.segments:
        typer.echo(f"{segment.label}: {segment.share:.1f}%")


@app.command()
def review(
    experiment: Path = typer.Argument(..., exists=True, readable=True, help="Experiment YAML or JSON."),
    output: Optional[Path] = typer.Option(None, help="Write the Markdown summary here."),
    delay: float = typer.Option(0.0, help="Seconds to wait before scoring."),
    config_path: Optional[Path] = typer.Option(None, exists=True, help="Project config."),
) -> None:
    """Score an experiment design and optionally write its summary."""
    cfg = load_config(config_path)
    configure_logging(cfg)
    enhanced = build_wizard_config(cfg).enhanced
    state = load_experiment(experiment)
    result = run_design_review(state, delay)
    typer.echo(f"Score: {result.score}/100 ({result.rating})")
    for issue in result.issues:
        typer.echo(f"  ! {issue}")
    for suggestion in result.suggestions:
        typer.echo(f"  - {suggestion}")
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(render_markdown(state, result, enhanced), encoding="utf-8")
        typer.echo(f"Summary saved to {output}")


def main():
    app()


if __name__ == "__main__":
    main()
