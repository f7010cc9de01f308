"""
Design review for the Review step
Heuristic quality score plus canned advice per experiment type
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from .state import ExperimentState

logger = logging.getLogger(__name__)

MAX_SCORE = 100
PENALTY_NO_SAMPLE_SIZE = 20
PENALTY_SMALL_MAB_SAMPLE = 10
PENALTY_NO_VARIABLES = 20
PENALTY_CMAB_WITHOUT_CONTEXT = 15
MIN_MAB_SAMPLE_SIZE = 100

DESIGN_SUGGESTIONS: Dict[str, List[str]] = {
    "mab": [
        "Define clear rewards that reflect your business objectives",
        "Choose appropriate priors based on your domain knowledge",
        "Consider the exploration-exploitation tradeoff when setting the allocation policy",
        "Plan how long your experiment needs to run before arms are compared",
    ],
    "cmab": [
        "Ensure context variables are available at decision time",
        "Select a small set of context features to avoid overfitting",
        "Check that every context combination receives enough participants",
        "Consider how context influences which arm performs best",
    ],
    "bayesian_ab": [
        "Define a clear success metric before starting",
        "Set priors based on existing knowledge",
        "Determine stopping criteria based on posterior probability",
        "Report credible intervals alongside the posterior probability of improvement",
    ],
}


@dataclass(frozen=True)
class DesignReview:
    """Result of the simulated design review.

    This is a checklist, not a statistical validation of the design.
    """

    score: int
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def rating(self) -> str:
        if self.score >= 80:
            return "Strong"
        if self.score >= 60:
            return "Needs attention"
        return "Incomplete"


def score_experiment(state: ExperimentState) -> Tuple[int, List[str]]:
    """
    Apply the penalty rules to a 100-point score

    The contextual-bandit penalty is only checked when variables exist;
    an empty variable list is already penalised on its own.
    """
    score = MAX_SCORE
    issues: List[str] = []

    if not state.sample_size:
        score -= PENALTY_NO_SAMPLE_SIZE
        issues.append("No sample size has been set.")
    elif state.experiment_type == "mab" and state.sample_size < MIN_MAB_SAMPLE_SIZE:
        score -= PENALTY_SMALL_MAB_SAMPLE
        issues.append(
            f"A sample size below {MIN_MAB_SAMPLE_SIZE} leaves little room for exploration in a MAB experiment."
        )

    if not state.variables:
        score -= PENALTY_NO_VARIABLES
        issues.append("No variables have been defined.")
    elif state.experiment_type == "cmab" and not state.context_variables:
        score -= PENALTY_CMAB_WITHOUT_CONTEXT
        issues.append("Contextual MAB experiments need at least one context variable.")

    return max(0, min(MAX_SCORE, score)), issues


def design_suggestions(experiment_type: str) -> List[str]:
    return list(DESIGN_SUGGESTIONS.get(experiment_type, DESIGN_SUGGESTIONS["mab"]))


def run_design_review(
    state: ExperimentState,
    delay_seconds: float = 1.5,
    sleep: Callable[[float], None] = time.sleep,
) -> DesignReview:
    """Score the design after a fixed pause that mimics a remote review."""
    if delay_seconds > 0:
        sleep(delay_seconds)
    score, issues = score_experiment(state)
    logger.debug("Design review score %s with %d issue(s)", score, len(issues))
    return DesignReview(
        score=score,
        issues=issues,
        suggestions=design_suggestions(state.experiment_type),
    )
