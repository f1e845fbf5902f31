"""Configuration module — frozen dataclass from defaults, YAML file, then env vars."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
SINKS = ("stdout", "file", "memory")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    sink: str = "stdout"
    log_file: str = "./logs/csp-reports.log"
    include_stack_trace: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080
    route: str = "/report"


_ENV_VARS = {
    "sink": "SINK",
    "log_file": "LOG_FILE",
    "include_stack_trace": "INCLUDE_STACK_TRACE",
    "log_level": "LOG_LEVEL",
    "host": "SERVER_HOST",
    "port": "SERVER_PORT",
    "route": "REPORT_ROUTE",
}

_CONVERTERS = {
    "include_stack_trace": _parse_bool,
    "port": int,
    "sink": lambda v: str(v).strip().lower(),
    "log_level": lambda v: str(v).strip().upper(),
}


def _load_yaml(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: str | None = None) -> Config:
    """Build Config from defaults <- YAML file <- env vars (highest priority)."""
    known = {f.name for f in fields(Config)}
    values: dict = {}

    path = path or os.environ.get("CONFIG_PATH")
    if path:
        file_values = _load_yaml(path)
        values.update({k: v for k, v in file_values.items() if k in known})

    for name, env_var in _ENV_VARS.items():
        if env_var in os.environ:
            values[name] = os.environ[env_var]

    kwargs = {}
    for name, value in values.items():
        convert = _CONVERTERS.get(name, str)
        kwargs[name] = convert(value)

    config = Config(**kwargs)
    if config.log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {config.log_level!r}")
    if config.sink not in SINKS:
        raise ValueError(f"Unknown sink: {config.sink!r}")
    return config


def configure_logging(config: Config):
    """Send operational logging to stderr; report records use the sink instead."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    )
