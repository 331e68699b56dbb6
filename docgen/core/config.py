"""
Application settings.

Settings are grouped in dataclasses, one per YAML section. Unknown keys
are rejected so that a typo in a config file fails loudly.
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict, Any
from pathlib import Path
from enum import Enum
import os
import yaml

from .errors import ConfigurationError


UNLIMITED_CREDITS = -1

# Searched in order when no explicit path is given
CONFIG_SEARCH_PATHS = (
    Path("config/default.yaml"),
    Path("config.yaml"),
    Path("~/.docgen/config.yaml"),
)


class LLMProvider(Enum):
    BEDROCK = "bedrock"
    MOCK = "mock"


class WireframeFormat(Enum):
    """Wireframe artifact variants."""
    TREE = "tree"          # JSON element tree, one per project
    HTML = "html"          # Styled markup, one per screen
    PREVIEW = "preview"    # Hosted UI preview, one per screen

    @classmethod
    def from_string(cls, value: str) -> 'WireframeFormat':
        try:
            return cls(value.lower().strip())
        except ValueError:
            raise ConfigurationError(
                f"Unknown wireframe format: {value}. Available: {[f.value for f in cls]}"
            )


@dataclass
class LLMConfig:
    """Text-generation backend settings (``generation.llm``)."""
    provider: LLMProvider = LLMProvider.BEDROCK
    model: str = field(default_factory=lambda: os.getenv(
        "BEDROCK_MODEL", "anthropic.claude-sonnet-4-20250514-v1:0"
    ))
    temperature: float = 0.3
    max_tokens: int = 8192
    timeout: int = 300  # seconds
    aws_region: str = field(default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"))
    # Throttling retries inside the client; the pipeline never retries
    max_retries: int = 0
    retry_delay: float = 1.0  # seconds

    def __post_init__(self):
        if isinstance(self.provider, str):
            try:
                self.provider = LLMProvider(self.provider)
            except ValueError:
                raise ConfigurationError(f"Unknown LLM provider: {self.provider}")


@dataclass
class GenerationConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    wireframe_format: WireframeFormat = WireframeFormat.HTML
    # Smaller output budget for per-screen markup
    html_max_tokens: int = 4096
    transcript_separator: str = "\n\n---\n\n"

    def __post_init__(self):
        if isinstance(self.llm, dict):
            self.llm = _section(LLMConfig, self.llm, "generation.llm")
        if isinstance(self.wireframe_format, str):
            self.wireframe_format = WireframeFormat.from_string(self.wireframe_format)


@dataclass
class EstimateConfig:
    """Cost estimate compilation settings."""
    default_daily_rate: Optional[float] = None
    # Reject complexities outside allowed_complexities instead of warning
    strict_complexity: bool = False
    allowed_complexities: List[float] = field(default_factory=lambda: [1, 1.5, 2, 3])


@dataclass
class CreditsConfig:
    """Credits granted per plan; UNLIMITED_CREDITS never decrements."""
    plan_credits: Dict[str, int] = field(default_factory=lambda: {
        "free": 3,
        "pro": 50,
        "enterprise": UNLIMITED_CREDITS,
    })

    def credits_for_plan(self, plan: str) -> int:
        try:
            return self.plan_credits[plan]
        except KeyError:
            raise ValueError(f"Unknown plan: {plan}. Available: {sorted(self.plan_credits)}")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    file: Optional[Path] = None

    def __post_init__(self):
        if isinstance(self.file, str):
            self.file = Path(self.file)


def _section(cls, data: Optional[Dict[str, Any]], name: str):
    """Build one settings dataclass from its YAML mapping."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping")

    unknown = set(data) - {f.name for f in fields(cls)}
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    return cls(**data)


def _plain(value: Any) -> Any:
    """Convert enums and paths to YAML-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


@dataclass
class AppConfig:
    """All settings, as loaded from one YAML file."""
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    estimate: EstimateConfig = field(default_factory=EstimateConfig)
    credits: CreditsConfig = field(default_factory=CreditsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """
        Build settings from a parsed YAML document.

        Raises:
            ConfigurationError: On unknown sections, keys or enum values
        """
        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            raise ConfigurationError(f"Unknown config sections: {', '.join(sorted(unknown))}")

        return cls(**{
            f.name: _section(f.default_factory, data.get(f.name), f.name)
            for f in fields(cls)
        })

    @classmethod
    def from_yaml(cls, path: Path | str) -> 'AppConfig':
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))

    def save_yaml(self, path: Path | str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """
    Load settings from ``config_path``, or from the first existing file in
    CONFIG_SEARCH_PATHS, or fall back to defaults.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist
    """
    if config_path:
        return AppConfig.from_yaml(config_path)

    for candidate in CONFIG_SEARCH_PATHS:
        path = candidate.expanduser()
        if path.exists():
            return AppConfig.from_yaml(path)

    return AppConfig()
