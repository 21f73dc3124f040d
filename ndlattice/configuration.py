from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator

import ndlattice.logger as logger

ENV_NO_BOUND_CHECKS = "NDLATTICE_NO_BOUND_CHECKS"


def merge_dicts(a: Dict, b: Dict, /) -> Dict:
    for key in b:
        if isinstance(a.get(key, None), dict) and isinstance(b[key], dict):
            a[key] = merge_dicts(a[key], b[key])
        else:
            a[key] = b[key]
    return a


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


DEFAULTS: Dict[str, Any] = {
    "bound_checks": True,
    "storage": "local",
    "dtype": "float64",
}

settings: Dict[str, Any] = merge_dicts(
    dict(DEFAULTS),
    {"bound_checks": not _env_flag(ENV_NO_BOUND_CHECKS)},
)


def configure(options: Dict[str, Any]) -> Dict[str, Any]:
    """Update global settings with the given (possibly partial) options and
    return the resulting settings. Unknown keys are rejected so that typos
    do not silently leave a default in place.
    """
    unknown = set(options) - set(DEFAULTS)
    if unknown:
        raise ValueError(f"Unknown configuration options: {sorted(unknown)}")
    if "bound_checks" in options:
        set_bound_checks(options["bound_checks"])
    merge_dicts(settings, {k: v for k, v in options.items() if k != "bound_checks"})
    return settings


def bound_checks_enabled() -> bool:
    return settings["bound_checks"]


def set_bound_checks(enabled: bool) -> None:
    """Enable or disable every bound and shape check in the library.

    With checks disabled, out-of-range coordinates and mismatched shapes are
    no longer reported; reads may return elements of a neighbouring row or
    raise an arbitrary exception from numpy. Only disable checks for code
    that has already been validated with checks enabled.
    """
    enabled = bool(enabled)
    if not enabled and settings["bound_checks"]:
        logger.warn("Bound checks disabled: invalid coordinates and shapes are no longer detected.")
    settings["bound_checks"] = enabled


@contextmanager
def bound_checks(enabled: bool) -> Iterator[None]:
    previous = settings["bound_checks"]
    set_bound_checks(enabled)
    try:
        yield
    finally:
        settings["bound_checks"] = previous
