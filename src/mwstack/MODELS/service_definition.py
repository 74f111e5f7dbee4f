"""
Models for defining services, including restart policies and mounts.
"""
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, model_validator
from enum import Enum

class RestartPolicyCondition(str, Enum):
    """
    Conditions under which the platform should restart a service.
    """
    NO = "no"
    ALWAYS = "always"
    ON_FAILURE = "on-failure"
    UNLESS_STOPPED = "unless-stopped"

class VolumeMount(BaseModel):
    """
    Defines a mapping between a host path (or named volume) and a service path.
    """
    source: str
    target: str
    read_only: bool = False

    def to_compose(self) -> str:
        """
        Renders the mount in compose short syntax.
        """
        spec = f"{self.source}:{self.target}"
        if self.read_only:
            spec += ":ro"
        return spec

class ServiceDefinition(BaseModel):
    """
    The full definition of a single service in the stack manifest.
    Exactly one of image or build_context must be set.
    """
    name: str
    image: Optional[str] = None
    build_context: Optional[str] = None

    depends_on: List[str] = []
    volumes: List[VolumeMount] = []
    ports: Dict[int, int] = {}  # {container: host}
    environment: Dict[str, str] = {}
    restart: Optional[RestartPolicyCondition] = None

    @model_validator(mode="after")
    def _check_build_source(self) -> "ServiceDefinition":
        if bool(self.image) == bool(self.build_context):
            raise ValueError(
                f"Service {self.name} must define exactly one of image or build"
            )
        return self

    @property
    def is_built(self) -> bool:
        return self.build_context is not None

    def to_compose(self) -> Dict[str, Any]:
        """
        Converts the definition into a docker-compose service mapping.

        :return: Mapping ready to be serialized as YAML.
        """
        spec: Dict[str, Any] = {}
        if self.image:
            spec["image"] = self.image
        else:
            spec["build"] = self.build_context
        if self.restart:
            spec["restart"] = self.restart.value
        if self.environment:
            spec["environment"] = dict(self.environment)
        if self.ports:
            spec["ports"] = [f"{host}:{container}" for container, host in self.ports.items()]
        if self.volumes:
            spec["volumes"] = [v.to_compose() for v in self.volumes]
        if self.depends_on:
            spec["depends_on"] = list(self.depends_on)
        return spec
