"""Workspace config file helpers.

The server reads its credentials from a KEY=VALUE file inside the
workspace. The launcher injects those keys into the child's environment,
but never lets the file override a variable the parent already has:

  parent environment (pre-existing) > workspace config file

The parent environment itself is never modified.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from dotenv import dotenv_values


def read_env_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    values = dotenv_values(path)
    out: dict[str, str] = {}
    for k, v in values.items():
        if k is None or v is None:
            continue
        out[str(k)] = str(v)
    return out


def build_child_env(
    env_file: Path | None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the environment for the supervised process.

    Args:
        env_file: workspace config file (skipped when None or missing)
        base: parent environment (defaults to os.environ)

    Returns:
        A new mapping: ``base`` plus every file key not already in ``base``.
    """
    if base is None:
        base = os.environ
    env = dict(base)
    if env_file is None:
        return env
    for k, v in read_env_file(env_file).items():
        if k not in env:
            env[k] = v
    return env


def has_any_key(env: Mapping[str, str], keys: Iterable[str]) -> bool:
    """Whether at least one of ``keys`` is set to a non-empty value."""
    return any(env.get(k, "").strip() for k in keys)
