"""Configuration management for archviz using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".archviz.json"


class LayoutStrategyName(str, Enum):
    """Registered layout strategies."""
    HIERARCHICAL = "hierarchical"
    LAYERED = "layered"
    FORCE_DIRECTED = "force_directed"
    CIRCULAR = "circular"
    GRID = "grid"


class ExportFormat(str, Enum):
    """Diagram text formats."""
    PLANTUML = "plantuml"
    GRAPHVIZ = "graphviz"


class Projection(str, Enum):
    """Relation set a node exposes as synthesized children when expanded."""
    STRUCTURAL = "structural"
    SURFACE = "surface"


class ViewMode(str, Enum):
    """Ambient filter applied to synthesized children."""
    ALL = "all"
    UI = "ui"
    BUSINESS_LOGIC = "business_logic"
    DATA_MODEL = "data_model"
    NAVIGATION = "navigation"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class LayoutConfig(BaseModel):
    """Layout configuration section shared by every strategy."""
    strategy: LayoutStrategyName = LayoutStrategyName.HIERARCHICAL
    seed: int = 42
    flow_sentinels: bool = Field(alias="flowSentinels", default=True)
    node_width: float = Field(alias="nodeWidth", default=160.0)
    node_height: float = Field(alias="nodeHeight", default=80.0)
    horizontal_spacing: float = Field(alias="horizontalSpacing", default=280.0)
    vertical_spacing: float = Field(alias="verticalSpacing", default=200.0)
    layer_spacing: float = Field(alias="layerSpacing", default=400.0)
    margin: float = 200.0

    @field_validator("node_width", "node_height")
    @classmethod
    def validate_node_size(cls, v):
        if v <= 0:
            raise ValueError("node size must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class ForceConfig(BaseModel):
    """Spring-embedder configuration section."""
    iterations: int = 300
    damping: float = 0.8
    max_force: float = Field(alias="maxForce", default=50.0)
    min_distance: float = Field(alias="minDistance", default=120.0)
    distance_floor: float = Field(alias="distanceFloor", default=1.0)
    epsilon: float | None = None  # max displacement below which the run stops early
    deadline_seconds: float | None = Field(alias="deadlineSeconds", default=None)

    @field_validator("iterations")
    @classmethod
    def validate_iterations(cls, v):
        if v < 0:
            raise ValueError("iterations must be >= 0")
        return v

    @field_validator("damping")
    @classmethod
    def validate_damping(cls, v):
        if not (0.0 < v <= 1.0):
            raise ValueError(f"damping must be in (0, 1], got: {v}")
        return v

    @field_validator("distance_floor", "max_force")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    model_config = ConfigDict(populate_by_name=True)


class SpiralConfig(BaseModel):
    """Incremental placement configuration section."""
    angle_per_node: float = Field(alias="anglePerNode", default=0.7)
    angle_per_attempt: float = Field(alias="anglePerAttempt", default=0.5)
    base_radius: float = Field(alias="baseRadius", default=200.0)
    radius_per_node: float = Field(alias="radiusPerNode", default=10.0)
    radius_per_attempt: float = Field(alias="radiusPerAttempt", default=20.0)
    max_attempts: int = Field(alias="maxAttempts", default=50)
    min_distance: float = Field(alias="minDistance", default=180.0)
    relaxation_iterations: int = Field(alias="relaxationIterations", default=10)

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v):
        if v < 1:
            raise ValueError("max_attempts must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True)


class CanvasConfig(BaseModel):
    """Canvas auto-growth configuration section."""
    padding: float = 50.0
    growth_factor: float = Field(alias="growthFactor", default=1.5)
    min_width: float = Field(alias="minWidth", default=2000.0)
    min_height: float = Field(alias="minHeight", default=2000.0)

    @field_validator("growth_factor")
    @classmethod
    def validate_growth_factor(cls, v):
        if v <= 1.0:
            raise ValueError(f"growth_factor must be > 1, got: {v}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class ExpansionConfig(BaseModel):
    """Interactive expansion configuration section."""
    projection: Projection = Projection.STRUCTURAL
    view_mode: ViewMode = Field(alias="viewMode", default=ViewMode.ALL)
    max_children: int = Field(alias="maxChildren", default=12)
    ring_radius: float = Field(alias="ringRadius", default=150.0)

    @field_validator("max_children")
    @classmethod
    def validate_max_children(cls, v):
        if v < 1:
            raise ValueError("max_children must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True)


class ExportConfig(BaseModel):
    """Diagram export configuration section."""
    font: str = "Inter"
    background: str = "#f8fafc"
    skinparams: bool = True
    aggregate_edges: bool = Field(alias="aggregateEdges", default=False)

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class ArchvizConfig(BaseModel):
    """Complete archviz configuration model."""
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    force: ForceConfig = Field(default_factory=ForceConfig)
    spiral: SpiralConfig = Field(default_factory=SpiralConfig)
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    expansion: ExpansionConfig = Field(default_factory=ExpansionConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ArchvizConfig:
    """Load configuration, falling back to defaults when no file is found.

    Without ``config_path`` the current directory and its parents are
    searched for .archviz.json.

    Raises:
        ValueError: If the file is not JSON or does not validate
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        return create_default_config()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        return ArchvizConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest .archviz.json in ``start_dir`` (default: cwd) or one of its parents."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate
    return None


def create_default_config() -> ArchvizConfig:
    """Create default configuration."""
    return ArchvizConfig()
