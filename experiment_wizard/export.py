"""
Export module for the experiment summary (Markdown, JSON)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Template

from .review import DesignReview
from .state import DOMAIN_LABELS, EXPERIMENT_TYPE_LABELS, ExperimentState

TEMPLATE_PATH = Path(__file__).parent / "templates" / "summary.md"


def summary_context(
    state: ExperimentState, review: Optional[DesignReview] = None, enhanced: bool = True
) -> Dict[str, Any]:
    return {
        "title": state.title,
        "description": state.description,
        "focus": state.focus,
        "experiment_type_label": EXPERIMENT_TYPE_LABELS.get(state.experiment_type, state.experiment_type),
        "domain_label": DOMAIN_LABELS.get(state.domain, state.domain),
        "randomization_method": state.randomization_method,
        "treatment_groups": state.treatment_groups,
        "assignment_ratio": state.assignment_ratio,
        "custom_ratio_value": state.custom_ratio_value,
        "sample_size": state.sample_size,
        "power_calculation": state.power_calculation,
        "outcome_variables": state.outcome_variables,
        "context_variables": state.context_variables,
        "show_type": enhanced,
        "show_context": enhanced and state.experiment_type == "cmab",
        "review": review,
    }


def render_markdown(
    state: ExperimentState, review: Optional[DesignReview] = None, enhanced: bool = True
) -> str:
    """
    Render the experiment summary to Markdown using the Jinja2 template

    Args:
        state: Current experiment state
        review: Optional design review to append
        enhanced: False leaves out the experiment type, which simple mode never asks for

    Returns:
        Rendered Markdown string
    """
    with open(TEMPLATE_PATH, "r", encoding="utf-8") as f:
        template = Template(f.read())
    return template.render(**summary_context(state, review, enhanced))


def export_json(state: ExperimentState) -> str:
    return json.dumps(state.to_dict(), indent=2, ensure_ascii=False)
