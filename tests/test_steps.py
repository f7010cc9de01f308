import pytest

from experiment_wizard.errors import FormatError, ValidationError
from experiment_wizard.state import ExperimentState, PowerCalculation, Variable
from experiment_wizard.steps import (
    VariableList,
    accept_sample_size_suggestion,
    assignment_preview,
    check_focus_for_suggestions,
    infer_data_type,
    parse_custom_ratio,
    randomization_suggestion_params,
    split_variable_suggestions,
    stratification_options,
    submit_basic_info,
    submit_randomization,
    submit_sample_size,
    submit_variables,
    treatment_group_labels,
)
from experiment_wizard.suggestions import CMAB_CONTEXT_DEFAULTS, Suggestion


# --------------------------------------------------------------------------
# Basic Info
# --------------------------------------------------------------------------


def test_basic_info_requires_all_text_fields():
    with pytest.raises(ValidationError) as excinfo:
        submit_basic_info(ExperimentState(), {"name": "  ", "description": "", "focus": ""})
    assert set(excinfo.value.errors) == {"name", "description", "focus"}
    assert excinfo.value.get("name") == "Name is required"


def test_basic_info_maps_name_to_title():
    values = {"name": "Test", "description": "d", "focus": "f", "domain": "education", "experiment_type": "cmab"}
    partial = submit_basic_info(ExperimentState(), values)
    assert partial == {
        "title": "Test",
        "description": "d",
        "domain": "education",
        "focus": "f",
        "experiment_type": "cmab",
    }


def test_basic_info_without_enhanced_mode_leaves_type_alone():
    values = {"name": "Test", "description": "d", "focus": "f", "experiment_type": "cmab"}
    assert "experiment_type" not in submit_basic_info(ExperimentState(), values, enhanced=False)


def test_name_suggestions_need_three_characters_of_focus():
    with pytest.raises(ValidationError) as excinfo:
        check_focus_for_suggestions(" ab ")
    assert "focus" in excinfo.value.errors
    assert check_focus_for_suggestions(" SMS ") == "SMS"


# --------------------------------------------------------------------------
# Sample Size
# --------------------------------------------------------------------------


def test_manual_sample_size_is_kept():
    partial = submit_sample_size(ExperimentState(), {"calculation_type": "manual", "sample_size": "250"})
    assert partial["sample_size"] == 250
    assert partial["power_calculation"] == PowerCalculation(0.2, 0.8, 0.05)


def test_blank_manual_sample_size_uses_calculation():
    state = ExperimentState(experiment_type="cmab")
    partial = submit_sample_size(state, {"calculation_type": "manual", "sample_size": ""})
    assert partial["sample_size"] == 152


def test_calculator_mode_ignores_manual_entry():
    values = {"calculation_type": "calculator", "sample_size": "7", "mde": 0.1, "power": 0.9, "alpha": 0.01}
    partial = submit_sample_size(ExperimentState(experiment_type="cmab"), values)
    assert partial["sample_size"] == 1368
    assert partial["power_calculation"] == PowerCalculation(0.1, 0.9, 0.01)


def test_calculator_ignores_type_outside_enhanced_mode():
    values = {"calculation_type": "calculator"}
    assert submit_sample_size(ExperimentState(experiment_type="cmab"), values, enhanced=False)["sample_size"] == 100


@pytest.mark.parametrize("raw", ["abc", "-3", "12.5", "0", "nan", "inf", "1e400"])
def test_invalid_manual_sample_size(raw):
    with pytest.raises(ValidationError) as excinfo:
        submit_sample_size(ExperimentState(), {"calculation_type": "manual", "sample_size": raw})
    assert "sample_size" in excinfo.value.errors


def test_accepting_suggestion_sets_sample_size():
    assert accept_sample_size_suggestion(Suggestion(384, "standard")) == {"sample_size": 384}


# --------------------------------------------------------------------------
# Randomization
# --------------------------------------------------------------------------


def test_treatment_group_labels():
    assert treatment_group_labels(3) == ["Control", "Treatment 1", "Treatment 2"]
    with pytest.raises(ValueError):
        treatment_group_labels(1)


def test_custom_ratio_preview():
    preview = assignment_preview("custom", "2:1:1", 3)
    assert preview.is_valid
    assert [s.label for s in preview.segments] == ["Control", "T1", "T2"]
    assert [s.share for s in preview.segments] == [50, 25, 25]


def test_equal_ratio_preview():
    preview = assignment_preview("equal", "", 4)
    assert [s.share for s in preview.segments] == [25, 25, 25, 25]


@pytest.mark.parametrize(
    "value, placeholder",
    [
        ("1:1", "Invalid ratio format"),
        ("2:x:1", "Invalid ratio format"),
        ("2:0:1", "Invalid ratio format"),
        ("²:1:1", "Invalid ratio format"),
        ("", "Define custom ratio"),
    ],
)
def test_custom_ratio_placeholders(value, placeholder):
    preview = assignment_preview("custom", value, 3)
    assert not preview.is_valid
    assert preview.segments == ()
    assert preview.placeholder == placeholder


def test_parse_custom_ratio_errors():
    assert parse_custom_ratio(" 3 : 1 ", 2) == [3, 1]
    with pytest.raises(FormatError):
        parse_custom_ratio("1:1", 3)
    with pytest.raises(FormatError):
        parse_custom_ratio("²:1", 2)


def test_randomization_submit_does_not_block_on_bad_ratio():
    values = {"randomization_method": "cluster", "treatment_count": 3, "assignment_ratio": "custom", "custom_ratio_value": "1:1"}
    partial = submit_randomization(ExperimentState(), values)
    assert partial == {
        "randomization_method": "cluster",
        "treatment_groups": ["Control", "Treatment 1", "Treatment 2"],
        "assignment_ratio": "custom",
        "custom_ratio_value": "1:1",
    }


def test_randomization_suggestion_waits_for_sample_size():
    assert randomization_suggestion_params(ExperimentState()) is None
    state = ExperimentState(sample_size=300, variables=[Variable("Gender", "context")])
    assert randomization_suggestion_params(state) == {"sample_size": 300, "variables": ["Gender"], "clusters": None}


def test_stratification_options_prefer_defined_variables():
    assert stratification_options(ExperimentState()) == ["Age Group", "Gender", "Location"]
    state = ExperimentState(variables=[Variable("Income")])
    assert stratification_options(state) == ["Income"]
    assert stratification_options(state, enhanced=False) == ["Age Group", "Gender", "Location"]


# --------------------------------------------------------------------------
# Variables
# --------------------------------------------------------------------------


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Conversion Rate", "numeric"),
        ("Completion Percentage", "numeric"),
        ("User Type", "categorical"),
        ("Is Returning", "binary"),
        ("Has Account", "binary"),
        ("IsMember", "binary"),
        ("Engagement", "numeric"),
    ],
)
def test_infer_data_type(name, expected):
    assert infer_data_type(name) == expected


def test_cmab_suggestions_split_every_third_name():
    names = ["Location", "Clicks", "Revenue", "Device", "Retention"]
    outcomes, contexts = split_variable_suggestions(names, "cmab")
    assert contexts == ["Location", "Device"]
    assert outcomes == ["Clicks", "Revenue", "Retention"]


def test_cmab_always_gets_context_suggestions():
    assert split_variable_suggestions([], "cmab") == ([], CMAB_CONTEXT_DEFAULTS)


def test_non_contextual_suggestions_are_all_outcomes():
    names = ["A", "B", "C"]
    assert split_variable_suggestions(names, "mab") == (names, [])
    assert split_variable_suggestions(names, "cmab", enhanced=False) == (names, [])


def test_variable_list_add_and_remove():
    variables = VariableList.from_state(ExperimentState(experiment_type="cmab"))
    variables.add("  Clicks ", "outcome", "numeric")
    variables.add("Region", "context", "categorical")
    assert [v.name for v in variables.outcomes] == ["Clicks"]
    assert [v.name for v in variables.contexts] == ["Region"]
    assert variables.remove(0) == Variable("Clicks", "outcome", "numeric")
    assert variables.names() == ["Region"]


def test_variable_list_rejects_blank_and_duplicates():
    variables = VariableList([Variable("Clicks")])
    with pytest.raises(ValidationError) as excinfo:
        variables.add("")
    assert "new_variable" in excinfo.value.errors
    with pytest.raises(ValidationError):
        variables.add("Clicks")
    assert len(variables) == 1


def test_context_variables_only_for_contextual_bandits():
    variables = VariableList.from_state(ExperimentState(experiment_type="mab"))
    with pytest.raises(ValidationError) as excinfo:
        variables.add("Region", "context")
    assert "variable_type" in excinfo.value.errors


def test_add_suggested_skips_existing_names():
    variables = VariableList.from_state(ExperimentState(experiment_type="cmab"))
    assert variables.add_suggested("Is Member", "context")
    assert not variables.add_suggested("Is Member", "outcome")
    assert variables.variables == [Variable("Is Member", "context", "binary")]


def test_submit_variables_commits_working_list():
    variables = VariableList([Variable("Clicks")])
    partial = submit_variables(ExperimentState(), {"variables": variables, "domain": "healthcare"})
    assert partial == {"variables": [Variable("Clicks")], "domain": "healthcare"}
