from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from allerscan.utils.errors import ConfigError


class CameraConfig(BaseModel):
    """Camera capture settings."""
    index: int = 0
    width: int = 1280   # ideal resolution, the driver may pick another
    height: int = 720
    flip_horizontal: bool = False
    max_read_failures: int = 30


class ScanConfig(BaseModel):
    """Scan loop and OCR settings."""
    interval: float = 3.0  # seconds between the end of one tick and the next
    language: str = "eng"
    granularity: Literal["word", "line"] = "word"
    min_confidence: float = 0.0
    tesseract_cmd: str | None = None

    @field_validator("interval")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("scan interval must be positive")
        return value


class OverlayConfig(BaseModel):
    """Overlay drawing settings."""
    color: tuple[int, int, int] = (0, 0, 255)  # BGR
    thickness: int = 2
    font_scale: float = 0.5
    label_mode: Literal["text", "keyword"] = "text"


class LoggingConfig(BaseModel):
    """Log output settings."""
    level: str = "INFO"
    file: str | None = None
    console: bool = True
    # Level for scan diagnostics (tick, OCR text, matches)
    diagnostics_level: str = "INFO"


class Config(BaseModel):
    camera: CameraConfig = CameraConfig()
    scan: ScanConfig = ScanConfig()
    overlay: OverlayConfig = OverlayConfig()
    logging: LoggingConfig = LoggingConfig()

    # Keywords to seed the store with at startup
    allergens: list[str] = Field(default_factory=list)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file. ``None`` returns
            the built-in defaults.

    Returns:
        Validated Config object.
    """
    if config_path is None:
        return Config()

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")

    try:
        return Config(**raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def save_config(config: Config, output_path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        output_path: Path to save the YAML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
