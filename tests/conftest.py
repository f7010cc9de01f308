from concurrent.futures import Executor, Future

import pytest

from experiment_wizard.errors import SuggestionFetchError
from experiment_wizard.state import ExperimentState, ExperimentStore, Variable
from experiment_wizard.suggestions import SuggestionClient, SuggestionProvider


class ScriptedProvider(SuggestionProvider):
    """Returns canned replies in order and records every prompt."""

    name = "scripted"

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


class FailingProvider(SuggestionProvider):
    name = "failing"

    def generate(self, prompt):
        raise SuggestionFetchError("service unavailable")


class ImmediateExecutor(Executor):
    """Runs submitted work on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until ``run_all`` is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        for future, fn, args, kwargs in self.pending:
            if future.set_running_or_notify_cancel():
                future.set_result(fn(*args, **kwargs))
        self.pending = []


@pytest.fixture
def store():
    return ExperimentStore()


@pytest.fixture
def offline_client():
    return SuggestionClient(FailingProvider())


@pytest.fixture
def complete_state():
    """A fully specified contextual bandit design."""
    return ExperimentState(
        title="SMS Reminders for Savings",
        description="Does a weekly reminder raise deposits?",
        domain="financial",
        focus="SMS Reminders",
        experiment_type="cmab",
        randomization_method="stratified",
        treatment_groups=["Control", "Treatment 1", "Treatment 2"],
        assignment_ratio="custom",
        custom_ratio_value="2:1:1",
        sample_size=600,
        variables=[
            Variable("Savings Rate", "outcome", "numeric"),
            Variable("Location", "context", "categorical"),
        ],
    )
