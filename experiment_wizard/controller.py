"""
Wizard controller: active step, navigation and submission
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import ValidationError
from .state import ExperimentState, ExperimentStore
from .steps import submit_basic_info, submit_randomization, submit_sample_size, submit_variables
from .suggestions import SUGGESTION_KINDS, SuggestionSlot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepDefinition:
    id: str
    name: str


STEPS = (
    StepDefinition("basic", "Basic Information"),
    StepDefinition("sample", "Sample Size"),
    StepDefinition("randomization", "Randomization Method"),
    StepDefinition("variables", "Variables & Metrics"),
    StepDefinition("review", "Review & Create"),
)
BASIC, SAMPLE_SIZE, RANDOMIZATION, VARIABLES, REVIEW = range(len(STEPS))
LAST_STEP = len(STEPS) - 1

StepHandler = Callable[[ExperimentState, Mapping[str, Any]], Dict[str, Any]]


@dataclass
class StepResult:
    """Outcome of submitting the active step."""

    ok: bool
    step: int
    errors: Dict[str, str] = field(default_factory=dict)


class WizardController:
    """
    Five-step state machine over a shared ExperimentStore

    Forward navigation happens only through ``submit`` (gated by the
    current step's own validation); ``back`` is always allowed.
    """

    def __init__(self, store: Optional[ExperimentStore] = None, enhanced: bool = True):
        self.store = store or ExperimentStore()
        self.enhanced = enhanced
        self.index = BASIC
        self.created = False
        self.slots: Dict[str, SuggestionSlot] = {kind: SuggestionSlot(kind) for kind in SUGGESTION_KINDS}
        self._handlers: Dict[int, StepHandler] = {
            BASIC: partial(submit_basic_info, enhanced=enhanced),
            SAMPLE_SIZE: partial(submit_sample_size, enhanced=enhanced),
            RANDOMIZATION: submit_randomization,
            VARIABLES: submit_variables,
        }

    @property
    def step(self) -> StepDefinition:
        return STEPS[self.index]

    @property
    def step_name(self) -> str:
        return self.step.name

    @property
    def state(self) -> ExperimentState:
        return self.store.get()

    @property
    def is_first(self) -> bool:
        return self.index == BASIC

    @property
    def is_last(self) -> bool:
        return self.index == LAST_STEP

    @property
    def progress(self) -> float:
        return (self.index + 1) / len(STEPS)

    def next(self) -> int:
        self.index = min(self.index + 1, LAST_STEP)
        logger.debug("Wizard moved to step %s (%s)", self.index, self.step.id)
        return self.index

    def back(self) -> int:
        self.index = max(self.index - 1, BASIC)
        logger.debug("Wizard moved back to step %s (%s)", self.index, self.step.id)
        return self.index

    def submit(self, values: Mapping[str, Any]) -> StepResult:
        """Validate the active step, merge its fields and advance."""
        handler = self._handlers.get(self.index)
        if handler is None:
            raise RuntimeError(f"Step '{self.step.id}' has no form to submit")
        try:
            update = handler(self.state, values)
        except ValidationError as exc:
            logger.debug("Step %s rejected: %s", self.step.id, exc.errors)
            return StepResult(ok=False, step=self.index, errors=exc.errors)
        self.store.update(update)
        self.next()
        return StepResult(ok=True, step=self.index)

    def create(self) -> str:
        """Finish the wizard. Nothing is persisted; the caller only gets an acknowledgement."""
        if not self.is_last:
            raise RuntimeError("Experiments can only be created from the review step")
        self.created = True
        logger.info("Experiment created: %s", self.state.title or "(untitled)")
        return "Experiment created!"

    def cancel_pending(self) -> None:
        for slot in self.slots.values():
            slot.cancel()

    def reset(self) -> None:
        self.cancel_pending()
        self.store.reset()
        self.index = BASIC
        self.created = False
