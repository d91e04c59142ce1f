"""
Negotiation Lens configuration module.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisConfig",
    "DEFAULT_CONFIG_PATH",
]

DEFAULT_CONFIG_PATH = Path(__file__).parent / "analysis_config.yaml"


class AnalysisConfig:
    """
    Analysis configuration manager

    Loads thresholds and initial values from YAML with environment
    variable override support.

    Environment overrides:
        NEGOTIATION_LENS_INITIAL_TRUST
        NEGOTIATION_LENS_INITIAL_PERSUASION
        NEGOTIATION_LENS_MIN_HISTORY
        NEGOTIATION_LENS_STRATEGY_TOP_K
    """

    ENV_PREFIX = "NEGOTIATION_LENS_"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize analysis configuration

        Args:
            config_path: Path to analysis_config.yaml (optional)
        """
        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        self._config: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            logger.warning(f"Config file not found at {self.config_path}, using defaults")
            self._config = self._get_default_config()
            return self._config

        with open(self.config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}

        self._config = self._merge(self._get_default_config(), loaded)
        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            "belief_state": {
                "initial_trust": 50.0,
                "initial_persuasion": 0.0,
                "max_concerns": 4,
            },
            "prediction": {
                "min_history": 3,
                "window_size": 5,
                "direction_window": 4,
                "direction_margin": 1,
            },
            "strategy": {
                "top_k": 5,
                "cold_start_count": 3,
                "max_score": 0.99,
            },
            "hallucination": {
                "threshold": 0.3,
                "contradiction_weight": 0.2,
            },
            "language": {
                "min_matches": 1,
            },
        }

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = AnalysisConfig._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _env(self, name: str) -> Optional[str]:
        return os.getenv(f"{self.ENV_PREFIX}{name}")

    def get_initial_trust(self) -> float:
        """
        Get the initial trust level

        Priority:
            1. NEGOTIATION_LENS_INITIAL_TRUST environment variable
            2. Configuration file
            3. Default (50)
        """
        env_value = self._env("INITIAL_TRUST")
        if env_value:
            return self._bounded_level(float(env_value), "INITIAL_TRUST")
        config = self.load()
        return self._bounded_level(
            float(config.get("belief_state", {}).get("initial_trust", 50.0)), "initial_trust"
        )

    def get_initial_persuasion(self) -> float:
        """Get the initial persuasion level (env override supported)"""
        env_value = self._env("INITIAL_PERSUASION")
        if env_value:
            return self._bounded_level(float(env_value), "INITIAL_PERSUASION")
        config = self.load()
        return self._bounded_level(
            float(config.get("belief_state", {}).get("initial_persuasion", 0.0)),
            "initial_persuasion",
        )

    def get_max_concerns(self) -> int:
        config = self.load()
        return int(config.get("belief_state", {}).get("max_concerns", 4))

    def get_min_history(self) -> int:
        """Get minimum entries required before forecasting (env override supported)"""
        env_value = self._env("MIN_HISTORY")
        value = int(env_value) if env_value else int(self.load()["prediction"]["min_history"])
        if value < 1:
            raise ValueError(f"min_history must be >= 1, got {value}")
        return value

    def get_prediction_config(self) -> Dict[str, Any]:
        config = self.load()
        return config.get("prediction", {})

    def get_strategy_top_k(self) -> int:
        """Get number of ranked strategies to return (env override supported)"""
        env_value = self._env("STRATEGY_TOP_K")
        value = int(env_value) if env_value else int(self.load()["strategy"]["top_k"])
        if value < 1:
            raise ValueError(f"strategy top_k must be >= 1, got {value}")
        return value

    def get_strategy_config(self) -> Dict[str, Any]:
        config = self.load()
        return config.get("strategy", {})

    def get_hallucination_threshold(self) -> float:
        config = self.load()
        return float(config.get("hallucination", {}).get("threshold", 0.3))

    def get_contradiction_weight(self) -> float:
        config = self.load()
        return float(config.get("hallucination", {}).get("contradiction_weight", 0.2))

    def get_language_min_matches(self) -> int:
        config = self.load()
        return int(config.get("language", {}).get("min_matches", 1))

    @staticmethod
    def _bounded_level(value: float, name: str) -> float:
        if not 0.0 <= value <= 100.0:
            raise ValueError(f"{name} must be between 0 and 100, got {value}")
        return value
