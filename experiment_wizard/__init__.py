from .calculator import calculate_sample_size, generate_sample_size_table
from .controller import STEPS, StepResult, WizardController
from .errors import FormatError, ParseError, SuggestionFetchError, ValidationError, WizardError
from .export import export_json, render_markdown
from .review import DesignReview, run_design_review, score_experiment
from .state import ExperimentState, ExperimentStore, PowerCalculation, Variable
from .suggestions import (
    GeminiProvider,
    OfflineProvider,
    Suggestion,
    SuggestionClient,
    SuggestionProvider,
    SuggestionSlot,
)

__version__ = "0.1.0"

__all__ = [
    "calculate_sample_size",
    "generate_sample_size_table",
    "STEPS",
    "StepResult",
    "WizardController",
    "FormatError",
    "ParseError",
    "SuggestionFetchError",
    "ValidationError",
    "WizardError",
    "export_json",
    "render_markdown",
    "DesignReview",
    "run_design_review",
    "score_experiment",
    "ExperimentState",
    "ExperimentStore",
    "PowerCalculation",
    "Variable",
    "GeminiProvider",
    "OfflineProvider",
    "Suggestion",
    "SuggestionClient",
    "SuggestionProvider",
    "SuggestionSlot",
]
