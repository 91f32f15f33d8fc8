"""Session configuration.

Settings for the interactive triage shell. They can be loaded from:
1. YAML/JSON files (``--config`` on the command line)
2. The ``TRIAGE_CONFIG`` environment variable
3. A ``triage.yaml`` in the working directory

Example usage:
    from triage.core.config import load_config

    config = load_config(Path("config/night_shift.yaml"))
    shell = TriageShell(config=config)
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

ENV_CONFIG_PATH = "TRIAGE_CONFIG"
DEFAULT_CONFIG_NAME = "triage.yaml"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class TriageConfig:
    """Triage shell configuration.

    Attributes:
        prompt: Prompt shown before each interactive command.
        echo_loaded_lines: Echo each line of a loaded file before running it.
        log_level: Name of the logging level for the console entry point.
        startup_file: Optional command file replayed when the shell starts.
        banner: Print the welcome and goodbye messages.
    """

    prompt: str = "triage> "
    echo_loaded_lines: bool = True
    log_level: str = "WARNING"
    startup_file: Optional[str] = None
    banner: bool = True

    def __post_init__(self):
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TriageConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(config_path: Path) -> TriageConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to a ``.yaml``, ``.yml`` or ``.json`` file.

    Returns:
        TriageConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the format is not supported or keys are unknown
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        if config_path.suffix in (".yaml", ".yml"):
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Malformed YAML in {config_path}: {e}") from e
        elif config_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    return TriageConfig.from_dict(data)


def save_config(config: TriageConfig, config_path: Path) -> None:
    """Save configuration to a YAML or JSON file.

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    data = asdict(config)

    if config_path.suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(
            f"Unsupported config format: {config_path.suffix}. "
            "Use .yaml, .yml, or .json"
        )

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        if config_path.suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def get_default_config_path() -> Optional[Path]:
    """Locate a configuration file without being told where it is.

    Checks in order:
    1. TRIAGE_CONFIG environment variable
    2. ./triage.yaml

    Returns:
        Path to the configuration file, or None if there is none.
    """
    if env_path := os.environ.get(ENV_CONFIG_PATH):
        return Path(env_path)

    cwd_config = Path.cwd() / DEFAULT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config

    return None


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for the console entry point."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
