from pydantic import BaseModel, Field
from typing import Any, Literal


class ServiceConfig(BaseModel):
    base_url: str = "http://localhost:7007/api/permission"
    plugin_id: str = "permission"
    timeout: float = Field(default=10.0, gt=0)
    token_env: str = "GATEKEEPER_TOKEN"


class GatekeeperConfig(BaseModel):
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    # key -> {name, attributes, resourceType}; validated when the registry is built
    permissions: dict[str, dict[str, Any]] = {}
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
