"""
Sample size calculator for the wizard's Sample Size step

The multipliers below are a fixed heuristic carried over from the first
version of the wizard. They are not a statistical power calculation and
should not be presented as one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

MDE_OPTIONS = (0.1, 0.2, 0.5)
POWER_OPTIONS = (0.8, 0.9, 0.7)
ALPHA_OPTIONS = (0.05, 0.01, 0.1)

BASE_SIZE_BY_MDE: Dict[float, float] = {0.1: 100, 0.2: 25, 0.5: 4}
DEFAULT_BASE_SIZE = 16
POWER_MULTIPLIERS: Dict[float, float] = {0.9: 1.3, 0.7: 0.8}
ALPHA_MULTIPLIERS: Dict[float, float] = {0.01: 1.75, 0.1: 0.7}
TYPE_MULTIPLIERS: Dict[str, float] = {"mab": 1.2, "cmab": 1.5}

MDE_LABELS = {
    0.1: "Small (0.1) - Subtle changes",
    0.2: "Medium (0.2) - Moderate improvements",
    0.5: "Large (0.5) - Major differences",
}
POWER_LABELS = {0.8: "80% (standard)", 0.9: "90% (high)", 0.7: "70% (lower)"}
ALPHA_LABELS = {0.05: "5% (standard)", 0.01: "1% (stringent)", 0.1: "10% (lenient)"}


@dataclass(frozen=True)
class SampleSizeParameters:
    """Inputs to the calculator"""

    mde: float = 0.2  # Minimum detectable effect
    power: float = 0.8
    alpha: float = 0.05  # Significance level
    experiment_type: Optional[str] = None

    def __post_init__(self):
        if self.mde <= 0:
            raise ValueError("MDE must be positive")
        if not 0 < self.power < 1:
            raise ValueError("Power must be between 0 and 1")
        if not 0 < self.alpha < 1:
            raise ValueError("Alpha must be between 0 and 1")


def calculate_sample_size(
    mde: float | str = 0.2,
    power: float | str = 0.8,
    alpha: float | str = 0.05,
    experiment_type: Optional[str] = None,
) -> int:
    """
    Heuristic total sample size

    base size from MDE, scaled by power, alpha and experiment type
    multipliers, then ceil(value) * 4.

    >>> calculate_sample_size(0.2, 0.8, 0.05, None)
    100
    """
    params = SampleSizeParameters(
        mde=float(mde), power=float(power), alpha=float(alpha), experiment_type=experiment_type
    )
    size = BASE_SIZE_BY_MDE.get(params.mde, DEFAULT_BASE_SIZE)
    size *= POWER_MULTIPLIERS.get(params.power, 1)
    size *= ALPHA_MULTIPLIERS.get(params.alpha, 1)
    size *= TYPE_MULTIPLIERS.get(params.experiment_type or "", 1)
    return math.ceil(size) * 4


def effect_size_label(mde: float | str) -> str:
    """Effect size wording used in sample size prompts."""
    value = float(mde)
    if value == 0.1:
        return "small"
    if value == 0.5:
        return "large"
    return "medium"


def precision_label(mde: float | str) -> str:
    value = float(mde)
    if value == 0.1:
        return "High precision (can detect small effects)"
    if value == 0.2:
        return "Medium precision (moderate effects)"
    return "Low precision (only large effects detectable)"


def precision_share(mde: float | str) -> float:
    """Fill fraction for the precision bar."""
    value = float(mde)
    if value == 0.1:
        return 0.75
    if value == 0.2:
        return 0.5
    return 0.25


def generate_sample_size_table(experiment_type: Optional[str] = None) -> pd.DataFrame:
    """Calculated sample sizes for every MDE/power/alpha option."""
    rows = []
    for mde in MDE_OPTIONS:
        for power in sorted(POWER_OPTIONS):
            for alpha in sorted(ALPHA_OPTIONS):
                rows.append({
                    "mde": mde,
                    "power": power,
                    "alpha": alpha,
                    "sample_size": calculate_sample_size(mde, power, alpha, experiment_type),
                })
    return pd.DataFrame(rows)
