"""Design QA configuration loader.

Loads design-qa.config.json configuration files. Every tunable threshold
used by the matcher, differ and aggregator is exposed here as a named
default and can be overridden per project.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .qa_logging import get_logger

logger = get_logger()

# Default configuration file name
CONFIG_FILENAME = "design-qa.config.json"
CONFIG_ENV_VAR = "DESIGN_QA_CONFIG"

# Matching
GEOMETRY_WEIGHT = 0.6
TEXT_WEIGHT = 0.4
ROLE_PENALTY = 0.5
MIN_MATCH_SCORE = 0.2

# Attribute tolerances
FONT_SIZE_TOLERANCE_PX = 2.0
FONT_SIZE_HIGH_SEVERITY_PX = 6.0
FONT_WEIGHT_TOLERANCE = 100
BASE_FONT_SIZE_PX = 16.0

# Readiness verdict
PRODUCTION_READY_MIN_SCORE = 95.0
PRODUCTION_READY_MAX_CRITICAL = 0
NEEDS_REVIEW_MIN_SCORE = 85.0
NEEDS_REVIEW_MAX_CRITICAL = 2

# Pipeline
PIPELINE_TIMEOUT_SECONDS = 300.0


@dataclass
class MatchingConfig:
    """Weights and threshold for pairing design and rendered elements."""

    geometry_weight: float = GEOMETRY_WEIGHT
    text_weight: float = TEXT_WEIGHT
    role_penalty: float = ROLE_PENALTY
    min_match_score: float = MIN_MATCH_SCORE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "geometryWeight": self.geometry_weight,
            "textWeight": self.text_weight,
            "rolePenalty": self.role_penalty,
            "minMatchScore": self.min_match_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchingConfig":
        """Create from dictionary."""
        return cls(
            geometry_weight=data.get("geometryWeight", GEOMETRY_WEIGHT),
            text_weight=data.get("textWeight", TEXT_WEIGHT),
            role_penalty=data.get("rolePenalty", ROLE_PENALTY),
            min_match_score=data.get("minMatchScore", MIN_MATCH_SCORE),
        )


@dataclass
class ToleranceConfig:
    """Per-attribute tolerances used by the differ."""

    font_size_px: float = FONT_SIZE_TOLERANCE_PX
    font_size_high_px: float = FONT_SIZE_HIGH_SEVERITY_PX
    font_weight: int = FONT_WEIGHT_TOLERANCE
    base_font_size: float = BASE_FONT_SIZE_PX

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "fontSizePx": self.font_size_px,
            "fontSizeHighPx": self.font_size_high_px,
            "fontWeight": self.font_weight,
            "baseFontSize": self.base_font_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToleranceConfig":
        """Create from dictionary."""
        return cls(
            font_size_px=data.get("fontSizePx", FONT_SIZE_TOLERANCE_PX),
            font_size_high_px=data.get("fontSizeHighPx", FONT_SIZE_HIGH_SEVERITY_PX),
            font_weight=data.get("fontWeight", FONT_WEIGHT_TOLERANCE),
            base_font_size=data.get("baseFontSize", BASE_FONT_SIZE_PX),
        )


@dataclass
class ReadinessConfig:
    """Thresholds for the readiness verdict."""

    production_ready_min_score: float = PRODUCTION_READY_MIN_SCORE
    production_ready_max_critical: int = PRODUCTION_READY_MAX_CRITICAL
    needs_review_min_score: float = NEEDS_REVIEW_MIN_SCORE
    needs_review_max_critical: int = NEEDS_REVIEW_MAX_CRITICAL

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "productionReadyMinScore": self.production_ready_min_score,
            "productionReadyMaxCritical": self.production_ready_max_critical,
            "needsReviewMinScore": self.needs_review_min_score,
            "needsReviewMaxCritical": self.needs_review_max_critical,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReadinessConfig":
        """Create from dictionary."""
        return cls(
            production_ready_min_score=data.get(
                "productionReadyMinScore", PRODUCTION_READY_MIN_SCORE
            ),
            production_ready_max_critical=data.get(
                "productionReadyMaxCritical", PRODUCTION_READY_MAX_CRITICAL
            ),
            needs_review_min_score=data.get(
                "needsReviewMinScore", NEEDS_REVIEW_MIN_SCORE
            ),
            needs_review_max_critical=data.get(
                "needsReviewMaxCritical", NEEDS_REVIEW_MAX_CRITICAL
            ),
        )


@dataclass
class EmbeddingConfig:
    """Configuration for text embeddings used by semantic similarity."""

    provider: str = "hashing"  # "hashing" or "openai"
    model: str = "text-embedding-3-small"
    dimensions: int = 384
    cache_size: int = 10000
    max_concurrency: int = 8

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provider": self.provider,
            "model": self.model,
            "dimensions": self.dimensions,
            "cacheSize": self.cache_size,
            "maxConcurrency": self.max_concurrency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmbeddingConfig":
        """Create from dictionary."""
        return cls(
            provider=data.get("provider", "hashing"),
            model=data.get("model", "text-embedding-3-small"),
            dimensions=data.get("dimensions", 384),
            cache_size=data.get("cacheSize", 10000),
            max_concurrency=data.get("maxConcurrency", 8),
        )


@dataclass
class NavigationStrategy:
    """A single page.goto attempt: wait condition and timeout."""

    wait_until: str
    timeout_ms: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"waitUntil": self.wait_until, "timeoutMs": self.timeout_ms}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NavigationStrategy":
        """Create from dictionary."""
        return cls(wait_until=data["waitUntil"], timeout_ms=data["timeoutMs"])


def _default_strategies() -> list[NavigationStrategy]:
    return [
        NavigationStrategy("domcontentloaded", 30000),
        NavigationStrategy("load", 45000),
        NavigationStrategy("networkidle", 60000),
    ]


@dataclass
class CaptureConfig:
    """Configuration for live page capture with Playwright."""

    viewport_width: int = 1440
    viewport_height: int = 900
    settle_ms: int = 3000
    max_elements: int = 500
    navigation_strategies: list[NavigationStrategy] = field(
        default_factory=_default_strategies
    )
    headless: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "settleMs": self.settle_ms,
            "maxElements": self.max_elements,
            "navigationStrategies": [s.to_dict() for s in self.navigation_strategies],
            "headless": self.headless,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CaptureConfig":
        """Create from dictionary."""
        viewport = data.get("viewport", {})
        strategies = data.get("navigationStrategies")
        return cls(
            viewport_width=viewport.get("width", 1440),
            viewport_height=viewport.get("height", 900),
            settle_ms=data.get("settleMs", 3000),
            max_elements=data.get("maxElements", 500),
            navigation_strategies=(
                [NavigationStrategy.from_dict(s) for s in strategies]
                if strategies is not None
                else _default_strategies()
            ),
            headless=data.get("headless", True),
        )


@dataclass
class PipelineConfig:
    """Configuration for the end-to-end comparison run."""

    timeout_seconds: float = PIPELINE_TIMEOUT_SECONDS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"timeoutSeconds": self.timeout_seconds}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PipelineConfig":
        """Create from dictionary."""
        return cls(timeout_seconds=data.get("timeoutSeconds", PIPELINE_TIMEOUT_SECONDS))


@dataclass
class DesignQAConfig:
    """Root configuration for design QA."""

    matching: MatchingConfig = field(default_factory=MatchingConfig)
    tolerances: ToleranceConfig = field(default_factory=ToleranceConfig)
    readiness: ReadinessConfig = field(default_factory=ReadinessConfig)
    embeddings: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "matching": self.matching.to_dict(),
            "tolerances": self.tolerances.to_dict(),
            "readiness": self.readiness.to_dict(),
            "embeddings": self.embeddings.to_dict(),
            "capture": self.capture.to_dict(),
            "pipeline": self.pipeline.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DesignQAConfig":
        """Create from dictionary."""
        return cls(
            matching=MatchingConfig.from_dict(data.get("matching", {})),
            tolerances=ToleranceConfig.from_dict(data.get("tolerances", {})),
            readiness=ReadinessConfig.from_dict(data.get("readiness", {})),
            embeddings=EmbeddingConfig.from_dict(data.get("embeddings", {})),
            capture=CaptureConfig.from_dict(data.get("capture", {})),
            pipeline=PipelineConfig.from_dict(data.get("pipeline", {})),
        )


class ConfigLoader:
    """Loader for design QA configuration."""

    def __init__(self, project_path: Path | None = None):
        """Initialize the config loader.

        Args:
            project_path: Path to the project root. Defaults to current directory.
        """
        self.project_path = Path(project_path) if project_path else Path.cwd()

    def load(self, config_path: Path | None = None) -> DesignQAConfig:
        """Load design QA configuration.

        Precedence (highest to lowest):
        1. Explicit config_path
        2. Environment variable DESIGN_QA_CONFIG
        3. design-qa.config.json in project root
        4. Default configuration

        Args:
            config_path: Optional explicit path to config file.

        Returns:
            Loaded DesignQAConfig instance.

        Raises:
            ConfigurationError: If an explicit path does not exist or a
                config file cannot be parsed.
        """
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigurationError(
                    f"Config file not found: {config_path}", str(config_path)
                )
            return self._load_from_file(config_path)

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            env_config_path = Path(env_path)
            if env_config_path.exists():
                return self._load_from_file(env_config_path)
            logger.warning(f"{CONFIG_ENV_VAR} points to missing file {env_path}")

        project_config = self.project_path / CONFIG_FILENAME
        if project_config.exists():
            return self._load_from_file(project_config)

        logger.debug("No design QA config found, using defaults")
        return DesignQAConfig()

    def _load_from_file(self, config_path: Path) -> DesignQAConfig:
        """Load configuration from a file.

        Raises:
            ConfigurationError: If the file is not valid JSON or has bad fields.
        """
        logger.debug(f"Loading design QA config from {config_path}")
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}", str(config_path)
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object", str(config_path)
            )
        try:
            return DesignQAConfig.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(
                f"Invalid config structure: {e}", str(config_path)
            ) from e

    def save(self, config: DesignQAConfig, config_path: Path | None = None) -> Path:
        """Save configuration to a file.

        Args:
            config: Configuration to save.
            config_path: Optional path. Defaults to project root.

        Returns:
            Path where config was saved.
        """
        if config_path is None:
            config_path = self.project_path / CONFIG_FILENAME

        content = json.dumps(config.to_dict(), indent=2)
        config_path.write_text(content, encoding="utf-8")
        logger.info(f"Saved design QA config to {config_path}")
        return config_path


def load_config(
    project_path: Path | None = None, config_path: Path | None = None
) -> DesignQAConfig:
    """Convenience function to load design QA configuration.

    Args:
        project_path: Optional project root path.
        config_path: Optional explicit config file.

    Returns:
        Loaded DesignQAConfig instance.
    """
    loader = ConfigLoader(project_path)
    return loader.load(config_path)
