"""pipeline.wiring

This module is the **composition root** for the Python runtime.

"Composition root" means: the single place where we *assemble* the running
application from its building blocks:

- load configuration (CLI flags, environment / ``.env``, YAML file)
- configure logging
- build the two Dependency-Track clients

Keeping this wiring in one place prevents configuration and dependency setup
from being duplicated across entrypoints (CLI, scripts, CI).

Precedence for every setting: CLI flag > environment variable > YAML config
file > built-in default.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv

from tools.dtrack import DTrackClient, DTrackConfig

from .report import DEFAULT_FILE_MODE
from .workers import DEFAULT_CONCURRENCY

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"

DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 100

# setting name -> environment variable
ENV_VARS: Dict[str, str] = {
    "url_a": "DTRACK_URL_A",
    "apikey_a": "DTRACK_APIKEY_A",
    "url_b": "DTRACK_URL_B",
    "apikey_b": "DTRACK_APIKEY_B",
    "concurrency": "DTRACK_COMPARE_CONCURRENCY",
    "out": "DTRACK_COMPARE_OUT",
    "timeout": "DTRACK_COMPARE_TIMEOUT",
}


@dataclass(frozen=True)
class CompareConfig:
    url_a: str
    apikey_a: str
    url_b: str
    apikey_b: str
    concurrency: int = DEFAULT_CONCURRENCY
    out: Path = Path(".")
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    file_mode: int = DEFAULT_FILE_MODE

    def instance_a(self) -> DTrackConfig:
        return DTrackConfig(self.url_a, self.apikey_a, timeout=self.timeout, page_size=self.page_size)

    def instance_b(self) -> DTrackConfig:
        return DTrackConfig(self.url_b, self.apikey_b, timeout=self.timeout, page_size=self.page_size)


def load_config_file(path: Path) -> Dict[str, Any]:
    """Load a YAML config file and flatten it to setting names.

    Expected shape::

        instance_a: {url: ..., api_key: ...}
        instance_b: {url: ..., api_key: ...}
        concurrency: 5
        out: reports/
        timeout: 30
        page_size: 100
    """
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Config YAML could not be parsed: {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Config YAML must be a mapping/object at top level: {p}")

    out: Dict[str, Any] = {}
    for suffix in ("a", "b"):
        inst = raw.get(f"instance_{suffix}") or {}
        if not isinstance(inst, dict):
            raise ValueError(f"instance_{suffix} must be a mapping in {p}")
        if inst.get("url") is not None:
            out[f"url_{suffix}"] = inst["url"]
        if inst.get("api_key") is not None:
            out[f"apikey_{suffix}"] = inst["api_key"]
    for key in ("concurrency", "out", "timeout", "page_size"):
        if raw.get(key) is not None:
            out[key] = raw[key]
    return out


def _coerce(name: str, value: Any, conv: Callable[[Any], Any]) -> Any:
    try:
        return conv(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid value for {name}: {value!r}") from e


def load_config(
    cli: Mapping[str, Any],
    *,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CompareConfig:
    """Resolve the effective configuration.

    *cli* maps setting names to flag values; ``None`` means "not given".
    """
    env = os.environ if environ is None else environ
    merged: Dict[str, Any] = load_config_file(config_path) if config_path else {}

    for name, var in ENV_VARS.items():
        if env.get(var):
            merged[name] = env[var]
    for name, value in cli.items():
        if value is not None:
            merged[name] = value

    cfg = CompareConfig(
        url_a=str(merged.get("url_a") or ""),
        apikey_a=str(merged.get("apikey_a") or ""),
        url_b=str(merged.get("url_b") or ""),
        apikey_b=str(merged.get("apikey_b") or ""),
        concurrency=_coerce("concurrency", merged.get("concurrency", DEFAULT_CONCURRENCY), int),
        out=Path(str(merged.get("out") or ".")),
        timeout=_coerce("timeout", merged.get("timeout", DEFAULT_TIMEOUT), float),
        page_size=_coerce("page_size", merged.get("page_size", DEFAULT_PAGE_SIZE), int),
    )

    if cfg.concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {cfg.concurrency}")
    if cfg.timeout <= 0:
        raise ValueError(f"timeout must be > 0, got {cfg.timeout}")
    if cfg.page_size < 1:
        raise ValueError(f"page size must be >= 1, got {cfg.page_size}")
    return cfg


def load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load ``.env`` (current directory by default) without overriding the environment."""
    load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level: {level!r}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
    # requests/urllib3 log every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(numeric, logging.INFO))


def build_clients(cfg: CompareConfig) -> Tuple[DTrackClient, DTrackClient]:
    """Build the clients for instance A and B. Raises DTrackConfigError."""
    return DTrackClient(cfg.instance_a()), DTrackClient(cfg.instance_b())
