from __future__ import annotations

import logging
from types import SimpleNamespace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

from platformdirs import PlatformDirs

from .models.delays import normalize_delays

log = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
APP_NAME = "WaitingInterval"
APP_AUTHOR = "WaitingInterval"

BACKENDS = ("asyncio", "apscheduler", "qt")

# Written to the data folder the first time no config exists there
_DEFAULT_CONFIG_TOML = b"""
[timers]
backend = "asyncio"
default_delays = [60, 30, 15, 5]
log_level = "WARNING"
log_to_file = false

[ramps]
# Named delay sequences, in seconds, read last element first
poll = [60, 30, 15, 5]
fast = [1]
"""


def _read_toml_bytes(data_bytes: bytes) -> Dict[str, Any]:
    return tomllib.loads(data_bytes.decode("utf-8"))


def _load_from_path(p: Path) -> Dict[str, Any]:
    with p.open("rb") as f:
        return tomllib.load(f)


def data_dir() -> Path:
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=False)
    p = Path(dirs.user_data_dir)
    p.mkdir(parents=True, exist_ok=True)
    return p


def _write_default_to(path: Path) -> None:
    path.write_bytes(_DEFAULT_CONFIG_TOML)
    log.info("Created default config at %s", path)


def load_config(path: Optional[Path | str] = None) -> SimpleNamespace:
    """Load configuration into a SimpleNamespace with `timers` and `ramps`.

    Behavior:
    - If an explicit `path` is provided and the file doesn't exist, raise FileNotFoundError.
    - If `path` is None, use config.toml in the user data folder, seeding it from the
      embedded defaults when it is missing.

    Delay lists are validated the same way WaitingIntervalRegistry.start validates
    them, so a bad ramp fails here with InvalidArgument rather than at first use.
    """
    data: Dict[str, Any]

    if path is not None:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found at {cfg_path}")
        data = _load_from_path(cfg_path)
    else:
        user_cfg = data_dir() / CONFIG_FILENAME
        if not user_cfg.exists():
            _write_default_to(user_cfg)
        data = _load_from_path(user_cfg)

    defaults = _read_toml_bytes(_DEFAULT_CONFIG_TOML)["timers"]
    timers = data.get("timers", {})
    backend = str(timers.get("backend", defaults["backend"])).lower()
    default_delays = normalize_delays(timers.get("default_delays", defaults["default_delays"]))
    log_level = str(timers.get("log_level", defaults["log_level"])).upper()
    log_to_file = bool(timers.get("log_to_file", defaults["log_to_file"]))

    if backend not in BACKENDS:
        log.warning("Unknown timer backend %r in config; expected one of %s", backend, ", ".join(BACKENDS))

    ramps: Dict[str, Tuple[float, ...]] = {}
    for name, delays in data.get("ramps", {}).items():
        ramps[str(name)] = normalize_delays(delays)

    ns = SimpleNamespace(
        timers=SimpleNamespace(
            backend=backend,
            default_delays=default_delays,
            log_level=log_level,
            log_to_file=log_to_file,
        ),
        ramps=ramps,
    )
    log.debug(
        "Loaded config: backend=%s, default_delays=%s, log_level=%s, log_to_file=%s, ramps=%s",
        backend, default_delays, log_level, log_to_file, sorted(ramps),
    )
    return ns


def resolve_delays(cfg: SimpleNamespace, name: Optional[str] = None) -> Tuple[float, ...]:
    """Return the named ramp, or the default delays when name is None. Unknown names raise KeyError."""
    if name is None:
        return tuple(cfg.timers.default_delays)
    try:
        return tuple(cfg.ramps[name])
    except KeyError:
        raise KeyError(f"No ramp named {name!r} in config") from None
