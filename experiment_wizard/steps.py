"""
Step forms for the Experiment Wizard

Each step takes the current ExperimentState plus the values entered on
its form and returns the partial update to merge into the store. A step
raises ValidationError when its own required inputs are missing; there is
no cross-step validation.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .calculator import calculate_sample_size
from .errors import FormatError, ValidationError
from .state import (
    DATA_TYPES,
    DOMAINS,
    EXPERIMENT_TYPES,
    RANDOMIZATION_METHODS,
    ExperimentState,
    PowerCalculation,
    Variable,
)
from .suggestions import CMAB_CONTEXT_DEFAULTS, Suggestion

MIN_FOCUS_LENGTH = 3
TREATMENT_GROUP_OPTIONS = (2, 3, 4, 5)
CLUSTER_TYPES = ("School", "Village", "Hospital", "Other")
DEFAULT_STRATIFICATION_VARIABLES = ("Age Group", "Gender", "Location")

METHOD_DESCRIPTIONS = {
    "simple": (
        "Simple randomization assigns participants completely at random, like flipping a coin. "
        "Best for larger sample sizes (>100)."
    ),
    "stratified": (
        "Stratified randomization ensures balance across important variables like gender or age group. "
        "Recommended when these factors might affect outcomes."
    ),
    "cluster": (
        "Cluster randomization assigns groups (e.g., schools, villages) rather than individuals. "
        "Use when interventions affect entire groups."
    ),
}

PENDING_RANDOMIZATION = Suggestion(
    suggestion="pending",
    explanation="Please set your sample size first to get appropriate randomization recommendations.",
    is_fallback=True,
)


def _text(values: Mapping[str, Any], key: str) -> str:
    return str(values.get(key) or "").strip()


# --------------------------------------------------------------------------
# Basic Info
# --------------------------------------------------------------------------


def check_focus_for_suggestions(focus: Optional[str]) -> str:
    """Name suggestions need a focus of at least three characters."""
    focus = (focus or "").strip()
    if len(focus) < MIN_FOCUS_LENGTH:
        raise ValidationError(
            {"focus": "Please enter a focus for your experiment (at least 3 characters)"}
        )
    return focus


def submit_basic_info(
    state: ExperimentState, values: Mapping[str, Any], enhanced: bool = True
) -> Dict[str, Any]:
    errors = {}
    focus = _text(values, "focus")
    name = _text(values, "name")
    description = _text(values, "description")
    if not focus:
        errors["focus"] = "Please provide the focus of your experiment"
    if not name:
        errors["name"] = "Name is required"
    if not description:
        errors["description"] = "Description is required"
    if errors:
        raise ValidationError(errors)

    domain = values.get("domain") or state.domain
    if domain not in DOMAINS:
        raise ValueError(f"Unknown domain: {domain}")

    partial: Dict[str, Any] = {
        "title": name,
        "description": description,
        "domain": domain,
        "focus": focus,
    }
    if enhanced:
        experiment_type = values.get("experiment_type") or state.experiment_type
        if experiment_type not in EXPERIMENT_TYPES:
            raise ValueError(f"Unknown experiment type: {experiment_type}")
        partial["experiment_type"] = experiment_type
    return partial


# --------------------------------------------------------------------------
# Sample Size
# --------------------------------------------------------------------------


def _parse_sample_size(raw: Any) -> Optional[int]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise ValidationError({"sample_size": "Sample size must be a whole number"})
    if not math.isfinite(number) or number < 1 or number != int(number):
        raise ValidationError({"sample_size": "Sample size must be a positive whole number"})
    return int(number)


def calculator_experiment_type(state: ExperimentState, enhanced: bool = True) -> Optional[str]:
    return state.experiment_type if enhanced else None


def submit_sample_size(
    state: ExperimentState, values: Mapping[str, Any], enhanced: bool = True
) -> Dict[str, Any]:
    """
    Manual mode keeps the entered size (or the calculated one when left
    blank); calculator mode always uses the calculated size.
    """
    mode = values.get("calculation_type", "manual")
    if mode not in ("manual", "calculator"):
        raise ValueError(f"Unknown calculation type: {mode}")
    mde = float(values.get("mde", 0.2))
    power = float(values.get("power", 0.8))
    alpha = float(values.get("alpha", 0.05))

    calculated = calculate_sample_size(mde, power, alpha, calculator_experiment_type(state, enhanced))
    sample_size = calculated
    if mode == "manual":
        sample_size = _parse_sample_size(values.get("sample_size")) or calculated

    return {
        "sample_size": sample_size,
        "power_calculation": PowerCalculation(mde=mde, power=power, alpha=alpha),
    }


def accept_sample_size_suggestion(suggestion: Suggestion) -> Dict[str, Any]:
    return {"sample_size": int(suggestion.suggestion)}


# --------------------------------------------------------------------------
# Randomization
# --------------------------------------------------------------------------


def treatment_group_labels(count: int) -> List[str]:
    count = int(count)
    if count < 2:
        raise ValueError("At least two treatment groups are required")
    return ["Control"] + [f"Treatment {i}" for i in range(1, count)]


def short_group_label(index: int) -> str:
    return "Control" if index == 0 else f"T{index}"


def parse_custom_ratio(value: str, group_count: int) -> List[int]:
    """Parse "2:1:1" into [2, 1, 1]; one positive integer per group."""
    parts = [p.strip() for p in (value or "").split(":")]
    if len(parts) != group_count:
        raise FormatError(f"Expected {group_count} ratio parts, got {len(parts)}")
    numbers = []
    for part in parts:
        if not re.fullmatch(r"[0-9]+", part) or int(part) <= 0:
            raise FormatError(f"Ratio parts must be positive integers, got {part!r}")
        numbers.append(int(part))
    return numbers


@dataclass(frozen=True)
class RatioSegment:
    label: str
    share: float  # percent of the bar


@dataclass(frozen=True)
class AssignmentPreview:
    segments: Tuple[RatioSegment, ...] = ()
    placeholder: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.placeholder is None


def assignment_preview(ratio: str, custom_value: str, group_count: int) -> AssignmentPreview:
    """Segments for the assignment ratio bar, or a placeholder message."""
    if ratio == "equal":
        share = 100 / group_count
        return AssignmentPreview(
            segments=tuple(RatioSegment(short_group_label(i), share) for i in range(group_count))
        )
    if not (custom_value or "").strip():
        return AssignmentPreview(placeholder="Define custom ratio")
    try:
        parts = parse_custom_ratio(custom_value, group_count)
    except FormatError:
        return AssignmentPreview(placeholder="Invalid ratio format")
    total = sum(parts)
    return AssignmentPreview(
        segments=tuple(
            RatioSegment(short_group_label(i), value / total * 100) for i, value in enumerate(parts)
        )
    )


def randomization_suggestion_params(state: ExperimentState) -> Optional[Dict[str, Any]]:
    """Parameters for a randomization suggestion, or None until a sample size exists."""
    if not state.sample_size or state.sample_size <= 0:
        return None
    return {
        "sample_size": state.sample_size,
        "variables": [v.name for v in state.variables] or None,
        "clusters": None,
    }


def stratification_options(state: ExperimentState, enhanced: bool = True) -> List[str]:
    if enhanced and state.variables:
        return [v.name for v in state.variables]
    return list(DEFAULT_STRATIFICATION_VARIABLES)


def submit_randomization(state: ExperimentState, values: Mapping[str, Any]) -> Dict[str, Any]:
    method = values.get("randomization_method", state.randomization_method) or ""
    if method and method not in RANDOMIZATION_METHODS:
        raise ValueError(f"Unknown randomization method: {method}")
    group_count = int(values.get("treatment_count") or len(state.treatment_groups) or 2)
    ratio = values.get("assignment_ratio") or "equal"
    if ratio not in ("equal", "custom"):
        raise ValueError(f"Unknown assignment ratio: {ratio}")
    return {
        "randomization_method": method,
        "treatment_groups": treatment_group_labels(group_count),
        "assignment_ratio": ratio,
        "custom_ratio_value": str(values.get("custom_ratio_value") or ""),
    }


# --------------------------------------------------------------------------
# Variables
# --------------------------------------------------------------------------


def infer_data_type(name: str) -> str:
    """Guess a data type from a suggested variable name."""
    if re.search(r"Rate|Percentage", name):
        return "numeric"
    if re.search(r"Category|Type", name):
        return "categorical"
    # plain substring match, so "IsMember" and "Hash Count" both count as binary
    if re.search(r"Is|Has", name):
        return "binary"
    return "numeric"


def split_variable_suggestions(
    names: Sequence[str], experiment_type: Optional[str], enhanced: bool = True
) -> Tuple[List[str], List[str]]:
    """Split suggested names into (outcomes, contexts).

    Only contextual bandits get context suggestions: every third name
    starting with the first, with a fixed list when none come back.
    """
    names = list(names)
    if not enhanced or experiment_type != "cmab":
        return names, []
    outcomes = [n for i, n in enumerate(names) if i % 3 != 0]
    contexts = [n for i, n in enumerate(names) if i % 3 == 0]
    return outcomes, contexts or list(CMAB_CONTEXT_DEFAULTS)


@dataclass
class VariableList:
    """Working list of variables edited on the Variables step before commit."""

    variables: List[Variable] = field(default_factory=list)
    allow_context: bool = False

    @classmethod
    def from_state(cls, state: ExperimentState, enhanced: bool = True) -> "VariableList":
        return cls(
            variables=list(state.variables),
            allow_context=enhanced and state.experiment_type == "cmab",
        )

    def names(self) -> List[str]:
        return [v.name for v in self.variables]

    def __contains__(self, name: str) -> bool:
        return name in self.names()

    def __len__(self) -> int:
        return len(self.variables)

    @property
    def outcomes(self) -> List[Variable]:
        return [v for v in self.variables if v.type == "outcome"]

    @property
    def contexts(self) -> List[Variable]:
        return [v for v in self.variables if v.type == "context"]

    def add(self, name: str, type: str = "outcome", data_type: str = "numeric") -> Variable:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"new_variable": "Variable name is required"})
        if name in self:
            raise ValidationError({"new_variable": "This variable already exists"})
        if type == "context" and not self.allow_context:
            raise ValidationError({"variable_type": "Context variables are only used by contextual MAB experiments"})
        if type not in ("outcome", "context"):
            raise ValueError(f"Unknown variable type: {type}")
        if data_type not in DATA_TYPES:
            raise ValueError(f"Unknown data type: {data_type}")
        variable = Variable(name=name, type=type, data_type=data_type)
        self.variables.append(variable)
        return variable

    def add_suggested(self, name: str, type: str = "outcome") -> bool:
        """Add a suggested variable unless one with the same name exists."""
        if name in self:
            return False
        if type == "context" and not self.allow_context:
            type = "outcome"
        self.variables.append(Variable(name=name, type=type, data_type=infer_data_type(name)))
        return True

    def remove(self, index: int) -> Variable:
        return self.variables.pop(index)


def submit_variables(state: ExperimentState, values: Mapping[str, Any]) -> Dict[str, Any]:
    variables = values.get("variables", state.variables)
    if isinstance(variables, VariableList):
        variables = variables.variables
    partial: Dict[str, Any] = {"variables": list(variables)}
    domain = values.get("domain")
    if domain:
        partial["domain"] = domain
    return partial
