"""
AI suggestion client for the Experiment Wizard

Builds a prompt per suggestion kind, sends it to a generative-language
provider and turns the free-text reply into a (suggestion, explanation)
pair. Every failure resolves to a static, kind-specific default; callers
never see an exception from ``request_suggestion``.
"""

from __future__ import annotations

import json
import logging
import math
import re
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import requests

from .config import SuggestionConfig
from .errors import ParseError, SuggestionFetchError
from .state import DOMAIN_LABELS, RANDOMIZATION_METHODS

logger = logging.getLogger(__name__)

TITLE = "title"
SAMPLE_SIZE = "sample_size"
RANDOMIZATION = "randomization"
VARIABLES = "variables"
SUGGESTION_KINDS = (TITLE, SAMPLE_SIZE, RANDOMIZATION, VARIABLES)
LIST_KINDS = (TITLE, VARIABLES)

DOMAIN_VARIABLES = {
    "education": ["Test Scores", "Attendance Rate", "Completion Rate"],
    "healthcare": ["Treatment Adherence", "Recovery Time", "Symptom Severity"],
    "financial": ["Savings Rate", "Loan Repayment", "Financial Knowledge Score"],
    "default": ["Engagement", "Satisfaction", "Conversion Rate"],
}
CMAB_CONTEXT_DEFAULTS = ["Location", "Age Group", "Time of Day"]

_LIST_MARKER = re.compile(r"^\s*(?:[-*•]+|\d+[.)]|[.])\s*")
_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?")


@dataclass(frozen=True)
class Suggestion:
    """A suggestion ready to be shown next to a form field."""

    suggestion: Any
    explanation: str
    is_fallback: bool = False


# --------------------------------------------------------------------------
# Providers
# --------------------------------------------------------------------------


class SuggestionProvider(ABC):
    """Something that turns a prompt into free text."""

    name = "provider"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the model's raw text or raise SuggestionFetchError."""


class OfflineProvider(SuggestionProvider):
    """Provider used when no model is configured; every call falls back."""

    name = "offline"

    def generate(self, prompt: str) -> str:
        raise SuggestionFetchError("No generative model configured")


class GeminiProvider(SuggestionProvider):
    """Google Generative Language REST API (generateContent)."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-pro",
        endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{endpoint.rstrip('/')}/{model}:generateContent"
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise SuggestionFetchError("GEMINI_API_KEY is not set")
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = self.session.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise SuggestionFetchError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise SuggestionFetchError(f"Gemini returned invalid JSON: {exc}") from exc

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise SuggestionFetchError(f"Gemini response had no candidates: {data!r}") from exc
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise SuggestionFetchError("Gemini returned an empty response")
        return text


def build_provider(config: SuggestionConfig) -> SuggestionProvider:
    if config.provider == "offline":
        return OfflineProvider()
    if config.provider == "gemini":
        return GeminiProvider(
            api_key=config.api_key,
            model=config.model,
            endpoint=config.endpoint,
            timeout=config.timeout,
        )
    raise ValueError(f"Unknown suggestion provider: {config.provider}")


# --------------------------------------------------------------------------
# Response parsing
# --------------------------------------------------------------------------


def find_balanced(text: str, opener: str, closer: str) -> Optional[str]:
    """Return the first balanced opener...closer substring, ignoring brackets inside strings."""
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return text[start:idx + 1]
        # unbalanced from this opener, try the next one
        start = text.find(opener, start + 1)
    return None


def _clean_line(line: str) -> str:
    line = _LIST_MARKER.sub("", line).strip()
    return line.strip('"').strip("'").strip()


def parse_response(text: Optional[str], as_list: bool = False) -> Tuple[Any, str]:
    """
    Extract (suggestion, explanation) from free text

    Tried in order: a JSON object with a "suggestion" key, a JSON array
    (list kinds only), then plain lines. Raises ParseError when nothing
    usable is found.
    """
    if not text or not text.strip():
        raise ParseError("Empty model response")

    obj_text = find_balanced(text, "{", "}")
    if obj_text:
        try:
            obj = json.loads(obj_text)
        except ValueError:
            obj = None
        if isinstance(obj, dict) and "suggestion" in obj:
            return obj["suggestion"], str(obj.get("explanation") or "").strip()

    if as_list:
        arr_text = find_balanced(text, "[", "]")
        if arr_text:
            try:
                arr = json.loads(arr_text)
            except ValueError:
                arr = None
            if isinstance(arr, list) and arr:
                return arr, ""

    lines = [_clean_line(line) for line in text.splitlines()]
    lines = [line for line in lines if line and not line.startswith(("{", "}"))]
    if not lines:
        raise ParseError("No usable lines in model response")
    if as_list:
        return lines, ""
    suggestion = re.sub(r"^suggestion:\s*", "", lines[0], flags=re.IGNORECASE).strip()
    explanation = " ".join(lines[1:])
    explanation = re.sub(r"^explanation:\s*", "", explanation, flags=re.IGNORECASE).strip()
    return suggestion, explanation


def _coerce_sample_size(value: Any) -> int:
    if isinstance(value, bool):
        raise ParseError("Sample size must be a number")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER.search(str(value))
        if not match:
            raise ParseError(f"No number in sample size suggestion: {value!r}")
        number = float(match.group(0).replace(",", ""))
    if not math.isfinite(number):
        raise ParseError(f"Sample size must be finite, got {number}")
    size = int(round(number))
    if size < 1:
        raise ParseError(f"Sample size must be positive, got {number}")
    return size


def _coerce_method(value: Any) -> str:
    text = str(value).strip().lower()
    if text in RANDOMIZATION_METHODS:
        return text
    positions = [(text.find(m), m) for m in RANDOMIZATION_METHODS if m in text]
    if not positions:
        raise ParseError(f"Unknown randomization method: {value!r}")
    return min(positions)[1]


def _coerce_list(value: Any) -> List[str]:
    items = value if isinstance(value, list) else [value]
    result: List[str] = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("name") or item.get("title") or item.get("suggestion")
        if item is None:
            continue
        text = _clean_line(str(item))
        if text and text not in result:
            result.append(text)
    if not result:
        raise ParseError("Suggestion list is empty")
    return result


COERCERS: Dict[str, Callable[[Any], Any]] = {
    TITLE: _coerce_list,
    SAMPLE_SIZE: _coerce_sample_size,
    RANDOMIZATION: _coerce_method,
    VARIABLES: _coerce_list,
}


# --------------------------------------------------------------------------
# Prompts and defaults
# --------------------------------------------------------------------------


def _join(values: Optional[Sequence[Any]]) -> str:
    if not values:
        return "None"
    return ", ".join(getattr(v, "name", str(v)) for v in values)


def build_prompt(kind: str, params: Mapping[str, Any]) -> str:
    """Prompt text for a suggestion kind; parameters are interpolated verbatim."""
    domain = params.get("domain") or "default"
    experiment_type = params.get("experiment_type") or "general"
    if kind == TITLE:
        return (
            f"I'm designing an experiment in the {domain} domain focusing on {params.get('focus', '')}.\n"
            f"Experiment type: {experiment_type}\n"
            "Please suggest 3 clear, professional titles for this experiment.\n"
            'Return only the titles as a JSON array of strings, like this: ["Title 1", "Title 2", "Title 3"]'
        )
    if kind == SAMPLE_SIZE:
        return (
            "I need a recommendation for sample size in an experiment with these parameters:\n"
            f"- Experiment domain: {domain}\n"
            f"- Expected effect size: {params.get('expected_effect', 'medium')}\n"
            f"- Experiment type: {experiment_type}\n\n"
            "Please provide your recommendation in this format:\n"
            "{\n"
            '  "suggestion": [numeric sample size],\n'
            '  "explanation": "[explanation of why this sample size is appropriate]"\n'
            "}"
        )
    if kind == RANDOMIZATION:
        return (
            "I need a recommendation for the best randomization method in an experiment with these parameters:\n"
            f"- Sample size: {params.get('sample_size')}\n"
            f"- Variables that might affect outcomes: {_join(params.get('variables'))}\n"
            f"- Natural clusters/groups: {_join(params.get('clusters'))}\n\n"
            "Choose from these randomization methods: simple, stratified, cluster.\n\n"
            "Please provide your recommendation in this format:\n"
            "{\n"
            '  "suggestion": "[randomization method]",\n'
            '  "explanation": "[explanation of why this method is appropriate]"\n'
            "}"
        )
    if kind == VARIABLES:
        title = params.get("title")
        return (
            f"I'm designing an experiment in the {domain} domain.\n"
            + (f"Experiment title: {title}\n" if title else "")
            + f"Experiment type: {experiment_type}\n\n"
            "Please suggest 3-5 key variables that would be important to measure in this experiment.\n"
            'Return only the variable names as a JSON array of strings, like this: ["Variable 1", "Variable 2", "Variable 3"]'
        )
    raise ValueError(f"Unknown suggestion kind: {kind}")


def default_suggestion(kind: str, params: Mapping[str, Any]) -> Suggestion:
    """Static suggestion used whenever the model call or parsing fails."""
    domain = params.get("domain") or "default"
    label = DOMAIN_LABELS.get(domain, domain)
    experiment_type = params.get("experiment_type")
    if kind == TITLE:
        focus = params.get("focus", "")
        type_label = f"{experiment_type.upper()} " if experiment_type else ""
        return Suggestion(
            suggestion=[
                f"Impact of Intervention on {focus} in {label}",
                f"Evaluating {focus} Methods in {label} Settings",
                f"{label} {focus} Improvement Study",
            ],
            explanation=(
                f"A good {type_label}experiment name should clearly indicate what you're testing "
                "and be specific enough to differentiate your experiment."
            ),
            is_fallback=True,
        )
    if kind == SAMPLE_SIZE:
        if experiment_type == "mab":
            return Suggestion(
                500,
                "Multi-Armed Bandit experiments typically need larger sample sizes to account for exploration phases.",
                is_fallback=True,
            )
        if experiment_type == "cmab":
            return Suggestion(
                600,
                "Contextual MABs require larger samples to accurately model contextual effects.",
                is_fallback=True,
            )
        return Suggestion(
            384,
            "This is a standard sample size for many experiments with medium effect sizes.",
            is_fallback=True,
        )
    if kind == RANDOMIZATION:
        return Suggestion(
            "simple",
            "Simple randomization is efficient and adequate for your experiment size and requirements.",
            is_fallback=True,
        )
    if kind == VARIABLES:
        return Suggestion(
            list(DOMAIN_VARIABLES.get(domain, DOMAIN_VARIABLES["default"])),
            f"These variables are commonly measured in {label.lower()} experiments.",
            is_fallback=True,
        )
    raise ValueError(f"Unknown suggestion kind: {kind}")


# --------------------------------------------------------------------------
# Client
# --------------------------------------------------------------------------


class SuggestionClient:
    """Request suggestions from a provider with static fallbacks."""

    def __init__(self, provider: Optional[SuggestionProvider] = None):
        self.provider = provider or OfflineProvider()

    def request_suggestion(self, kind: str, params: Optional[Mapping[str, Any]] = None) -> Suggestion:
        if kind not in SUGGESTION_KINDS:
            raise ValueError(f"Unknown suggestion kind: {kind}")
        params = dict(params or {})
        fallback = default_suggestion(kind, params)
        try:
            raw = self.provider.generate(build_prompt(kind, params))
            value, explanation = parse_response(raw, as_list=kind in LIST_KINDS)
            value = COERCERS[kind](value)
        except SuggestionFetchError as exc:
            logger.warning("Suggestion request for %s failed: %s", kind, exc)
            return fallback
        except ParseError as exc:
            logger.warning("Could not parse %s suggestion: %s", kind, exc)
            return fallback
        except Exception:
            logger.exception("Unexpected error while requesting %s suggestion", kind)
            return fallback
        return Suggestion(value, explanation or fallback.explanation)

    def title_suggestions(self, domain: str, focus: str, experiment_type: Optional[str] = None) -> Suggestion:
        return self.request_suggestion(
            TITLE, {"domain": domain, "focus": focus, "experiment_type": experiment_type}
        )

    def sample_size_suggestion(
        self, experiment_type: Optional[str], domain: str, expected_effect: str
    ) -> Suggestion:
        return self.request_suggestion(
            SAMPLE_SIZE,
            {"experiment_type": experiment_type, "domain": domain, "expected_effect": expected_effect},
        )

    def randomization_suggestion(
        self,
        sample_size: int,
        variables: Optional[Sequence[Any]] = None,
        clusters: Optional[Sequence[str]] = None,
    ) -> Suggestion:
        return self.request_suggestion(
            RANDOMIZATION,
            {"sample_size": sample_size, "variables": variables, "clusters": clusters},
        )

    def variable_suggestions(
        self, experiment_type: Optional[str], domain: str, title: Optional[str] = None
    ) -> Suggestion:
        return self.request_suggestion(
            VARIABLES, {"experiment_type": experiment_type, "domain": domain, "title": title}
        )


class SuggestionSlot:
    """
    Tracks the latest request for one suggestion field

    Each request gets a generation number; a response is applied only if
    no newer request (or cancel) happened while it was in flight.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.result: Optional[Suggestion] = None
        self.loading = False
        self.last_key: Any = None
        self._generation = 0
        self._future: Optional[Future] = None
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def watch(self, key: Any) -> bool:
        """Record the watched inputs; True when they changed since last call."""
        if self.last_key == key and (self.result is not None or self.loading):
            return False
        self.last_key = key
        return True

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            if self._future is not None:
                self._future.cancel()
                self._future = None
            self.loading = True
            return self._generation

    def resolve(self, generation: int, result: Suggestion) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale %s suggestion (generation %s)", self.name, generation)
                return False
            self.result = result
            self.loading = False
            self._future = None
            return True

    def set(self, result: Suggestion) -> None:
        """Replace the result without a request (e.g. a pending placeholder)."""
        self.resolve(self.begin(), result)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            self.loading = False
            if self._future is not None:
                self._future.cancel()
                self._future = None

    def request(self, client: SuggestionClient, kind: str, params: Mapping[str, Any]) -> Optional[Suggestion]:
        generation = self.begin()
        result = client.request_suggestion(kind, params)
        return result if self.resolve(generation, result) else None

    def submit(
        self, executor: Executor, client: SuggestionClient, kind: str, params: Mapping[str, Any]
    ) -> Future:
        generation = self.begin()
        future = executor.submit(client.request_suggestion, kind, dict(params))

        def _done(done: Future) -> None:
            if done.cancelled():
                return
            self.resolve(generation, done.result())

        with self._lock:
            if generation == self._generation:
                self._future = future
        future.add_done_callback(_done)
        return future
