"""
Experiment state for the wizard
Holds the shared record every step form reads from and merges into
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

logger = logging.getLogger(__name__)

Domain = Literal["default", "education", "healthcare", "financial"]
ExperimentType = Literal["mab", "cmab", "bayesian_ab"]
RandomizationMethod = Literal["", "simple", "stratified", "cluster"]
AssignmentRatio = Literal["equal", "custom"]
VariableType = Literal["outcome", "context"]
DataType = Literal["numeric", "categorical", "binary"]

DOMAINS = ("default", "education", "healthcare", "financial")
DOMAIN_LABELS = {
    "default": "General",
    "education": "Education",
    "healthcare": "Healthcare",
    "financial": "Financial Inclusion",
}
EXPERIMENT_TYPES = ("mab", "cmab", "bayesian_ab")
EXPERIMENT_TYPE_LABELS = {
    "mab": "Multi-Armed Bandit (MAB)",
    "cmab": "Contextual MAB",
    "bayesian_ab": "Bayesian A/B Test",
}
RANDOMIZATION_METHODS = ("simple", "stratified", "cluster")
VARIABLE_TYPES = ("outcome", "context")
DATA_TYPES = ("numeric", "categorical", "binary")


@dataclass(frozen=True)
class Variable:
    """A measured outcome or a context feature."""

    name: str
    type: VariableType = "outcome"
    data_type: DataType = "numeric"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type, "dataType": self.data_type}

    @classmethod
    def from_value(cls, value: Any) -> "Variable":
        if isinstance(value, Variable):
            return value
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, Mapping):
            return cls(
                name=str(value["name"]),
                type=value.get("type", "outcome"),
                data_type=value.get("dataType", value.get("data_type", "numeric")),
            )
        raise TypeError(f"Cannot build a Variable from {type(value).__name__}")


@dataclass(frozen=True)
class PowerCalculation:
    """Parameters used by the sample size calculator."""

    mde: float
    power: float
    alpha: float

    def to_dict(self) -> Dict[str, float]:
        return {"mde": self.mde, "power": self.power, "alpha": self.alpha}

    @classmethod
    def from_value(cls, value: Any) -> Optional["PowerCalculation"]:
        if value is None or isinstance(value, PowerCalculation):
            return value
        return cls(
            mde=float(value["mde"]),
            power=float(value["power"]),
            alpha=float(value["alpha"]),
        )


@dataclass(frozen=True)
class ExperimentState:
    """Everything the wizard knows about the experiment being designed."""

    title: str = ""
    description: str = ""
    domain: Domain = "default"
    focus: str = ""
    experiment_type: ExperimentType = "mab"
    randomization_method: RandomizationMethod = ""
    treatment_groups: List[str] = field(default_factory=list)
    assignment_ratio: AssignmentRatio = "equal"
    custom_ratio_value: str = ""
    sample_size: Optional[int] = None
    power_calculation: Optional[PowerCalculation] = None
    variables: List[Variable] = field(default_factory=list)

    @property
    def outcome_variables(self) -> List[Variable]:
        return [v for v in self.variables if v.type == "outcome"]

    @property
    def context_variables(self) -> List[Variable]:
        return [v for v in self.variables if v.type == "context"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "domain": self.domain,
            "focus": self.focus,
            "experimentType": self.experiment_type,
            "randomizationMethod": self.randomization_method,
            "treatmentGroups": list(self.treatment_groups),
            "assignmentRatio": self.assignment_ratio,
            "customRatioValue": self.custom_ratio_value,
            "sampleSize": self.sample_size,
            "powerCalculation": self.power_calculation.to_dict() if self.power_calculation else None,
            "variables": [v.to_dict() for v in self.variables],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExperimentState":
        return merge_state(cls(), data)


# camelCase keys as used by the serialized record
FIELD_ALIASES = {
    "experimentType": "experiment_type",
    "randomizationMethod": "randomization_method",
    "treatmentGroups": "treatment_groups",
    "assignmentRatio": "assignment_ratio",
    "customRatioValue": "custom_ratio_value",
    "sampleSize": "sample_size",
    "powerCalculation": "power_calculation",
}
FIELD_NAMES = {f.name for f in dataclasses.fields(ExperimentState)}


def _coerce(name: str, value: Any) -> Any:
    if name == "variables":
        return [Variable.from_value(v) for v in (value or [])]
    if name == "power_calculation":
        return PowerCalculation.from_value(value)
    if name == "treatment_groups":
        return list(value or [])
    if name == "sample_size":
        return None if value is None else int(value)
    return value


def normalize_partial(partial: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase keys to field names and coerce nested records."""
    normalized: Dict[str, Any] = {}
    for key, value in partial.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in FIELD_NAMES:
            raise KeyError(f"Unknown experiment field: {key}")
        normalized[name] = _coerce(name, value)
    return normalized


def merge_state(state: ExperimentState, partial: Mapping[str, Any]) -> ExperimentState:
    """Shallow merge: keys in partial overwrite, everything else is kept."""
    changes = normalize_partial(partial)
    if not changes:
        return state
    return dataclasses.replace(state, **changes)


Listener = Callable[[ExperimentState], None]


class ExperimentStore:
    """Single owner of the experiment state for one wizard session.

    Step forms receive the store by reference and write back through
    ``update``; subscribers are called synchronously after every update.
    """

    def __init__(self, initial: Optional[ExperimentState] = None):
        self._state = initial or ExperimentState()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def get(self) -> ExperimentState:
        return self._state

    def update(self, partial: Mapping[str, Any]) -> ExperimentState:
        with self._lock:
            self._state = merge_state(self._state, partial)
            state = self._state
            listeners = list(self._listeners)
        if partial:
            logger.debug("Experiment state updated: %s", sorted(partial))
        for listener in listeners:
            listener(state)
        return state

    def reset(self) -> ExperimentState:
        with self._lock:
            self._state = ExperimentState()
            state = self._state
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state)
        return state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe
