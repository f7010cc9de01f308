from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "default.yaml"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class SuggestionConfig:
    """Settings for the generative-model suggestion client."""

    provider: str = "gemini"
    model: str = "gemini-1.5-pro"
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models"
    api_key: Optional[str] = None
    timeout: float = 30.0


@dataclass(frozen=True)
class WizardConfig:
    """Settings for the wizard steps."""

    enhanced: bool = True
    review_delay_seconds: float = 1.5


def _expand_env(value):
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _resolve_placeholder(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if value.startswith("${") and value.endswith("}"):
        return None
    return value or None


def load_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load a YAML config file with ${VAR} placeholders expanded.

    Falls back to the packaged default.yaml when no path is given.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        if path:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return {}
    with open(config_path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    return _expand_env(raw)


def build_suggestion_config(cfg: Dict[str, Any]) -> SuggestionConfig:
    section = cfg.get("suggestions", {}) or {}
    defaults = SuggestionConfig()
    api_key = _resolve_placeholder(section.get("api_key")) or _resolve_placeholder(
        os.getenv("GEMINI_API_KEY")
    )
    return SuggestionConfig(
        provider=str(section.get("provider", defaults.provider)).lower(),
        model=section.get("model", defaults.model),
        endpoint=str(section.get("endpoint", defaults.endpoint)).rstrip("/"),
        api_key=api_key,
        timeout=float(section.get("timeout", defaults.timeout)),
    )


def build_wizard_config(cfg: Dict[str, Any]) -> WizardConfig:
    wizard_cfg = cfg.get("wizard", {}) or {}
    review_cfg = cfg.get("review", {}) or {}
    return WizardConfig(
        enhanced=bool(wizard_cfg.get("enhanced", True)),
        review_delay_seconds=float(review_cfg.get("delay_seconds", 1.5)),
    )


def configure_logging(cfg: Optional[Dict[str, Any]] = None, level: Optional[str] = None) -> None:
    """Apply the logging section of the config to the root logger."""
    log_cfg = (cfg or {}).get("logging", {}) or {}
    level_name = (level or log_cfg.get("level") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_cfg.get("format", DEFAULT_LOG_FORMAT),
    )
