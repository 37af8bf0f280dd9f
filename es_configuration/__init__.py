"""
Elasticsearch index and alias configuration
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv():
    """Load .env from the working directory (preferred) or repo root (fallback)."""
    cwd_env = Path.cwd() / ".env"
    repo_root_env = Path(__file__).resolve().parents[1] / ".env"

    # Note: override=False to keep real env (CI, containers) as source of truth.
    if cwd_env.exists():
        load_dotenv(cwd_env, override=False)
        return
    if repo_root_env.exists():
        load_dotenv(repo_root_env, override=False)


def get_env(name: str, default: str = None) -> str:
    """Get env var, falling back to default when missing/empty."""
    value = os.getenv(name)
    if value is None or str(value).strip() == "":
        return default
    return value


def get_env_int(name: str, default: int = None) -> int:
    """Get int env var, raise if set but invalid."""
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except Exception as e:
        raise RuntimeError(f"Invalid int env var {name}={raw!r}") from e


def get_env_float(name: str, default: float = None) -> float:
    """Get float env var, raise if set but invalid."""
    raw = get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except Exception as e:
        raise RuntimeError(f"Invalid float env var {name}={raw!r}") from e


_load_dotenv()

__version__ = "1.0.0"

from .errors import (  # noqa: E402
    ElasticsearchConfigurationError,
    ClientConnectionError,
    ConfigurationNotFoundError,
    RemoteOperationError,
    WorkflowError,
    DocumentIdError,
)
from .settings import ElasticsearchOptions  # noqa: E402
from .configuration import ElasticsearchConfiguration  # noqa: E402

__all__ = [
    "ElasticsearchConfiguration",
    "ElasticsearchOptions",
    "ElasticsearchConfigurationError",
    "ClientConnectionError",
    "ConfigurationNotFoundError",
    "RemoteOperationError",
    "WorkflowError",
    "DocumentIdError",
    "get_env",
    "get_env_int",
    "get_env_float",
]
