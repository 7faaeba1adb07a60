"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import GatekeeperConfig


def load_config(cli_path: str | None = None) -> GatekeeperConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    An explicit ``cli_path`` must exist and hold a mapping. The implicit
    locations are skipped when missing or empty.
    """
    if cli_path:
        path = Path(cli_path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {path}")
        raw = _read_yaml(path)
        if raw is None:
            raise ValueError(f"Config file is empty: {path}")
        return _build_config(path, raw)

    for path in (Path("./gatekeeper.yaml"), Path.home() / ".gatekeeper" / "config.yaml"):
        if not path.is_file():
            continue
        raw = _read_yaml(path)
        if raw is not None:
            return _build_config(path, raw)

    return GatekeeperConfig()


def _read_yaml(path: Path) -> object:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _build_config(path: Path, raw: object) -> GatekeeperConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}")
    try:
        return GatekeeperConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `gatekeeper config init`
DEFAULT_CONFIG_TEMPLATE = """\
# gatekeeper.yaml

# Permission service
service:
  base_url: "http://localhost:7007/api/permission"   # may contain {plugin_id}
  plugin_id: "permission"
  timeout: 10.0
  token_env: "GATEKEEPER_TOKEN"   # env var holding the bearer token

# Permission registry: symbolic key -> definition
permissions:
  CATALOG_ENTITY_READ:
    name: "catalog.entity.read"
    attributes:
      CRUD_ACTION: "read"
    resourceType: "catalog-entity"
  CATALOG_ENTITY_DELETE:
    name: "catalog.entity.delete"
    attributes:
      CRUD_ACTION: "delete"
    resourceType: "catalog-entity"
  ADMIN_ROUTE:
    name: "admin.route.view"
    attributes:
      ROUTE_VISIBILITY: true

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
