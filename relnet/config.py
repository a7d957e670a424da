"""Configuration loader for the relationship network engine."""
from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

LOGGER = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_FILE_ENV_VAR = "RELNET_CONFIG_FILE"
CANVAS_WIDTH_ENV_VAR = "RELNET_CANVAS_WIDTH"
CANVAS_HEIGHT_ENV_VAR = "RELNET_CANVAS_HEIGHT"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


class _FrozenModel(BaseModel):
    """Base model enforcing immutability for config sections."""

    model_config = ConfigDict(frozen=True)


class GraphConfig(_FrozenModel):
    """Link derivation strengths and high-affinity thresholds."""

    employer_link_strength: float = Field(0.8, gt=0.0, le=1.0)
    transaction_link_strength: float = Field(0.9, gt=0.0, le=1.0)
    affinity_link_strength: float = Field(0.5, gt=0.0, le=1.0)
    affinity_anchor_threshold: float = Field(80.0, ge=0.0, le=100.0)
    affinity_candidate_threshold: float = Field(75.0, ge=0.0, le=100.0)
    affinity_max_links: int = Field(2, ge=0)

    @model_validator(mode="after")
    def _validate_thresholds(self) -> "GraphConfig":
        if self.affinity_candidate_threshold > self.affinity_anchor_threshold:
            raise ValueError("affinity_candidate_threshold must not exceed affinity_anchor_threshold")
        return self


class LayoutConfig(_FrozenModel):
    """Initial clustered placement and node sizing."""

    canvas_width: float = Field(800.0, gt=0)
    canvas_height: float = Field(500.0, gt=0)
    cluster_radius_ratio: float = Field(0.3, ge=0.0)
    sub_radius_min: float = Field(30.0, ge=0.0)
    sub_radius_spread: float = Field(50.0, ge=0.0)
    node_radius_min: float = Field(15.0, gt=0.0)
    node_radius_max: float = Field(30.0, gt=0.0)

    @model_validator(mode="after")
    def _validate_radius_band(self) -> "LayoutConfig":
        if self.node_radius_min > self.node_radius_max:
            raise ValueError("node_radius_min must not exceed node_radius_max")
        return self


class SimulationConfig(_FrozenModel):
    """Force constants for the per-frame integrator."""

    centering_strength: float = Field(0.001, ge=0.0)
    repulsion_strength: float = Field(0.5, ge=0.0)
    repulsion_padding: float = Field(20.0, ge=0.0)
    link_rest_length: float = Field(100.0, ge=0.0)
    link_rest_slack: float = Field(50.0, ge=0.0)
    link_stiffness: float = Field(0.01, ge=0.0)
    damping: float = Field(0.9, gt=0.0, le=1.0)
    coincident_distance: float = Field(1.0, gt=0.0)
    frame_interval_seconds: float = Field(0.016, gt=0.0)
    idle_speed_threshold: Optional[float] = Field(None, gt=0.0)


class ViewportConfig(_FrozenModel):
    """Zoom bounds and step factors."""

    min_zoom: float = Field(0.5, gt=0.0)
    max_zoom: float = Field(2.0, gt=0.0)
    wheel_zoom_in: float = Field(1.1, gt=1.0)
    wheel_zoom_out: float = Field(0.9, gt=0.0, lt=1.0)
    button_zoom_in: float = Field(1.2, gt=1.0)
    button_zoom_out: float = Field(0.8, gt=0.0, lt=1.0)

    @model_validator(mode="after")
    def _validate_zoom_bounds(self) -> "ViewportConfig":
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        return self

    def clamp_zoom(self, zoom: float) -> float:
        """Clamp ``zoom`` into the configured ``[min_zoom, max_zoom]`` band."""

        return max(self.min_zoom, min(self.max_zoom, zoom))


class RenderConfig(_FrozenModel):
    """Styling knobs used by the draw command renderer."""

    highlight_color: str = Field("#3B82F6", min_length=1)
    font_family: str = Field("Inter, system-ui, sans-serif", min_length=1)
    tooltip_height: float = Field(80.0, gt=0)
    tooltip_padding: float = Field(10.0, ge=0)
    tooltip_corner_radius: float = Field(6.0, ge=0)
    glyph_width_ratio: float = Field(0.6, gt=0)


class AppConfig(_FrozenModel):
    """Top-level configuration composed from config.yaml."""

    graph: GraphConfig = Field(default_factory=GraphConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @staticmethod
    def default_path() -> Path:
        """Return the default configuration path.

        Returns:
            Path: Absolute path to config.yaml at the repository root.
        """
        override = os.getenv(CONFIG_FILE_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return REPO_ROOT / "config.yaml"


def _parse_dimension(key: str, raw: str) -> Optional[float]:
    """Parse a positive canvas dimension from an environment value."""

    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring non-numeric value for %s: %r", key, raw)
        return None
    if value <= 0:
        LOGGER.warning("Ignoring non-positive value for %s: %s", key, raw)
        return None
    return value


def _apply_environment_overrides(raw_content: Dict[str, Any]) -> Dict[str, Any]:
    """Merge environment-based overrides into the raw configuration mapping.

    Args:
        raw_content: Parsed YAML configuration prior to Pydantic validation.

    Returns:
        Dict[str, Any]: Configuration mapping with environment overrides applied.
    """

    for env_key, field_name in (
        (CANVAS_WIDTH_ENV_VAR, "canvas_width"),
        (CANVAS_HEIGHT_ENV_VAR, "canvas_height"),
    ):
        raw = os.getenv(env_key)
        if not raw:
            continue
        value = _parse_dimension(env_key, raw)
        if value is None:
            continue
        layout_section = raw_content.setdefault("layout", {})
        layout_section[field_name] = value
        LOGGER.info("Layout %s overridden from environment (%s)", field_name, value)
    return raw_content


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read YAML content from disk.

    Args:
        path: Location of the YAML file.

    Returns:
        Dict[str, Any]: Parsed YAML content.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        LOGGER.error("Configuration file missing at %s", path)
        raise ConfigError("Configuration file not found") from exc
    except yaml.YAMLError as exc:
        LOGGER.error("Invalid YAML syntax in %s", path)
        raise ConfigError("Invalid YAML syntax") from exc
    if not isinstance(data, dict):
        LOGGER.error("Configuration root must be a mapping: %s", path)
        raise ConfigError("Configuration root must be a mapping")
    return data


@lru_cache(maxsize=1)
def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load engine configuration from YAML.

    Args:
        path: Optional override path to the YAML file.

    Returns:
        AppConfig: Parsed configuration object.

    Raises:
        ConfigError: If the configuration cannot be loaded or validated.
    """
    config_path = path or AppConfig.default_path()
    raw_content = _read_yaml(config_path)
    raw_content = _apply_environment_overrides(raw_content)
    try:
        return AppConfig(**raw_content)
    except ValidationError as exc:
        LOGGER.error("Invalid configuration values: %s", exc)
        raise ConfigError("Configuration validation failed") from exc
