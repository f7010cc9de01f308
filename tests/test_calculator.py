import math

import pytest

from experiment_wizard.calculator import (
    calculate_sample_size,
    effect_size_label,
    generate_sample_size_table,
    precision_label,
    precision_share,
)


@pytest.mark.parametrize(
    "mde, power, alpha, experiment_type, expected",
    [
        (0.2, 0.8, 0.05, None, 100),
        (0.2, 0.8, 0.05, "bayesian_ab", 100),
        (0.1, 0.8, 0.05, None, 400),
        (0.5, 0.8, 0.05, None, 16),
        (0.2, 0.9, 0.05, None, 132),
        (0.2, 0.8, 0.05, "cmab", 152),
        (0.1, 0.9, 0.01, "cmab", 1368),
        (0.5, 0.7, 0.1, "mab", 12),
    ],
)
def test_calculated_sample_sizes(mde, power, alpha, experiment_type, expected):
    assert calculate_sample_size(mde, power, alpha, experiment_type) == expected


def test_string_inputs_match_numbers():
    assert calculate_sample_size("0.1", "0.9", "0.01", "cmab") == calculate_sample_size(0.1, 0.9, 0.01, "cmab")


def test_unlisted_mde_uses_default_base():
    assert calculate_sample_size(0.3, 0.8, 0.05) == 64


def test_results_are_multiples_of_four():
    table = generate_sample_size_table("mab")
    assert len(table) == 27
    assert (table["sample_size"] % 4 == 0).all()


def test_invalid_parameters_raise():
    with pytest.raises(ValueError):
        calculate_sample_size(0.2, 1.5, 0.05)
    with pytest.raises(ValueError):
        calculate_sample_size(0, 0.8, 0.05)


def test_labels():
    assert effect_size_label(0.1) == "small"
    assert effect_size_label("0.2") == "medium"
    assert effect_size_label(0.5) == "large"
    assert precision_label(0.1).startswith("High precision")
    assert precision_share(0.5) == 0.25


BASE = {0.1: 100, 0.2: 25, 0.5: 4}
POWER_FACTOR = {0.7: 0.8, 0.8: 1, 0.9: 1.3}
ALPHA_FACTOR = {0.01: 1.75, 0.05: 1, 0.1: 0.7}
TYPE_FACTOR = {None: 1, "bayesian_ab": 1, "mab": 1.2, "cmab": 1.5}


@pytest.mark.parametrize("experiment_type", [None, "bayesian_ab", "mab", "cmab"])
def test_table_matches_formula_over_full_grid(experiment_type):
    table = generate_sample_size_table(experiment_type)
    seen = set()
    for row in table.itertuples(index=False):
        size = BASE[row.mde] * POWER_FACTOR[row.power] * ALPHA_FACTOR[row.alpha] * TYPE_FACTOR[experiment_type]
        assert row.sample_size == math.ceil(size) * 4
        assert row.sample_size == calculate_sample_size(row.mde, row.power, row.alpha, experiment_type)
        seen.add((row.mde, row.power, row.alpha))
    assert len(seen) == 27
