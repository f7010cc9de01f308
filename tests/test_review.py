from experiment_wizard.review import DESIGN_SUGGESTIONS, run_design_review, score_experiment
from experiment_wizard.state import ExperimentState, Variable


def test_missing_sample_size_and_variables():
    state = ExperimentState(experiment_type="cmab", sample_size=None, variables=[])
    score, issues = score_experiment(state)
    assert score == 60
    assert len(issues) == 2


def test_complete_design_scores_full_marks(complete_state):
    assert score_experiment(complete_state) == (100, [])


def test_small_mab_sample_is_penalised():
    state = ExperimentState(experiment_type="mab", sample_size=50, variables=[Variable("Clicks")])
    score, issues = score_experiment(state)
    assert score == 90
    assert "exploration" in issues[0]


def test_contextual_bandit_without_context_variables():
    state = ExperimentState(experiment_type="cmab", sample_size=500, variables=[Variable("Clicks")])
    assert score_experiment(state)[0] == 85


def test_small_sample_rule_only_applies_to_mab():
    state = ExperimentState(experiment_type="bayesian_ab", sample_size=20, variables=[Variable("Clicks")])
    assert score_experiment(state) == (100, [])


def test_review_waits_then_scores(complete_state):
    delays = []
    result = run_design_review(complete_state, delay_seconds=1.5, sleep=delays.append)
    assert delays == [1.5]
    assert result.score == 100
    assert result.rating == "Strong"
    assert result.suggestions == DESIGN_SUGGESTIONS["cmab"]


def test_review_without_delay_does_not_sleep():
    delays = []
    result = run_design_review(ExperimentState(), delay_seconds=0, sleep=delays.append)
    assert delays == []
    assert result.score == 60
    assert result.rating == "Needs attention"
