"""
Domain Loader — Load and validate domain configurations from YAML files.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from drapekit.domain.schema import Domain


CONFIGS_DIR = Path(__file__).parent / "configs"

# Domain used when none is requested explicitly
DEFAULT_DOMAIN_ID = os.environ.get("DRAPEKIT_DOMAIN", "draping")

# Domain cache
_domains: dict[str, Domain] = {}


def load_domain(path: Path | str) -> Domain:
    """
    Load a domain configuration from a YAML file.

    Args:
        path: Path to the domain YAML file

    Returns:
        Domain configuration

    Raises:
        FileNotFoundError: If file doesn't exist
        pydantic.ValidationError: If the configuration is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Domain file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    # Parse with Pydantic (validates automatically)
    return Domain.model_validate(data or {})


def get_domain(domain_id: str | None = None) -> Domain:
    """
    Get a domain by ID, loading from the bundled configs if needed.

    Args:
        domain_id: Domain ID (default: DRAPEKIT_DOMAIN or 'draping')

    Returns:
        Domain configuration

    Raises:
        FileNotFoundError: If domain file not found
    """
    domain_id = domain_id or DEFAULT_DOMAIN_ID
    if domain_id in _domains:
        return _domains[domain_id]

    domain = load_domain(_get_domain_path(domain_id))
    _domains[domain_id] = domain

    return domain


def list_domains() -> list[str]:
    """List the IDs of bundled domain configurations."""
    return sorted(p.stem for p in CONFIGS_DIR.glob("*.yaml"))


def clear_domain_cache() -> None:
    """Clear the domain cache."""
    _domains.clear()


def _get_domain_path(domain_id: str) -> Path:
    """Get the path to a domain file by ID."""
    path = CONFIGS_DIR / f"{domain_id}.yaml"
    if path.exists():
        return path

    raise FileNotFoundError(
        f"Domain '{domain_id}' not found. Available: {', '.join(list_domains()) or '(none)'}"
    )
