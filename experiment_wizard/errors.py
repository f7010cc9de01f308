"""
Exception types for the Experiment Wizard
"""

from __future__ import annotations

from typing import Dict, Optional


class WizardError(Exception):
    """Base class for wizard errors."""


class ValidationError(WizardError):
    """A step form is missing required input.

    Attributes:
        errors: Mapping of field name to the message shown next to the field
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))

    def get(self, field: str) -> Optional[str]:
        return self.errors.get(field)


class FormatError(WizardError):
    """A custom assignment ratio could not be parsed."""


class SuggestionFetchError(WizardError):
    """The generative model could not be reached or returned an error."""


class ParseError(WizardError):
    """A model response did not contain a usable suggestion."""
