import logging
from pathlib import Path
from typing import List, Optional, Tuple, Type, TypeVar

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .utils import parse_ports

logger = logging.getLogger(__name__)

DEFAULT_HOSTS_FILE = "pscan.hosts"
DEFAULT_CONFIG_FILE = "~/.pscan.yaml"
DEFAULT_PORTS = [22, 80, 443]

C = TypeVar("C", bound="HostsConfig")


class HostsConfig(BaseSettings):
    """
    Settings shared by every command.

    Values come from, highest first: explicit keyword arguments (command
    line flags), PSCAN_* environment variables, the YAML config file set
    in `yaml_file`, then the defaults below.
    """
    hosts_file: str = Field(DEFAULT_HOSTS_FILE, min_length=1)

    model_config = SettingsConfigDict(
        env_prefix="PSCAN_",
        case_sensitive=False,
        extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings]
        if settings_cls.model_config.get("yaml_file"):
            sources.append(YamlConfigSettingsSource(settings_cls))
        return tuple(sources)


class ScanConfig(HostsConfig):
    """
    Validation model for scan parameters.
    Enforces strict types and safe ranges before execution.
    """
    ports: List[int] = Field(default_factory=lambda: list(DEFAULT_PORTS), min_length=1)
    timeout: float = Field(1.0, gt=0, le=10.0)
    concurrency: int = Field(100, ge=1, le=5000)

    @field_validator('ports', mode='before')
    @classmethod
    def parse_port_spec(cls, v):
        # Config files may write ports as "22,80,8000-8010"
        if isinstance(v, str):
            return parse_ports(v)
        return v

    @field_validator('ports')
    @classmethod
    def validate_ports(cls, v):
        # Reject out-of-range ports, drop repeats, keep the caller's order
        bad = [p for p in v if not 1 <= p <= 65535]
        if bad:
            raise ValueError(f"Ports out of range 1-65535: {bad}")
        return list(dict.fromkeys(v))


def load_config(config_cls: Type[C], config_file: Optional[str] = None, **overrides) -> C:
    """
    Builds `config_cls` with `config_file` as its YAML layer.

    Overrides set to None are treated as not given, so unset command line
    flags fall through to the environment and the config file. A missing
    config file is skipped.
    """
    if config_file and Path(config_file).expanduser().is_file():
        logger.info("Using config file: %s", config_file)

    class FileConfig(config_cls):
        model_config = SettingsConfigDict(yaml_file=config_file)

    return FileConfig(**{k: v for k, v in overrides.items() if v is not None})
