import json

from experiment_wizard.export import export_json, render_markdown
from experiment_wizard.review import run_design_review
from experiment_wizard.state import ExperimentState, PowerCalculation


def test_markdown_summary(complete_state):
    text = render_markdown(complete_state)
    assert text.startswith("# SMS Reminders for Savings")
    assert "**Experiment type:** Contextual MAB" in text
    assert "**Domain:** Financial Inclusion" in text
    assert "Control, Treatment 1, Treatment 2" in text
    assert "custom (2:1:1)" in text
    assert "- Location (categorical)" in text
    assert "Design Review" not in text


def test_markdown_for_empty_state():
    text = render_markdown(ExperimentState())
    assert "# Untitled experiment" in text
    assert "**Total sample size:** Not set" in text
    assert "_No outcome variables defined._" in text
    assert "**Context**" not in text


def test_markdown_includes_power_and_review():
    state = ExperimentState(sample_size=100, power_calculation=PowerCalculation(0.2, 0.8, 0.05))
    review = run_design_review(state, delay_seconds=0)
    text = render_markdown(state, review)
    assert "**Power:** 80%" in text
    assert "**Score:** 80/100 (Strong)" in text
    assert "No variables have been defined." in text


def test_json_export_round_trips(complete_state):
    data = json.loads(export_json(complete_state))
    assert data["sampleSize"] == 600
    assert ExperimentState.from_dict(data) == complete_state


def test_simple_mode_leaves_out_experiment_type(complete_state):
    text = render_markdown(complete_state, enhanced=False)
    assert "Experiment type" not in text
    assert "**Context**" not in text
    assert "**Domain:** Financial Inclusion" in text
    assert "\n- **Domain:**" in text
