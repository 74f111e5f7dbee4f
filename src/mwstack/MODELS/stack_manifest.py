"""
Model for the stack manifest, the declarative description of all services.
"""
from typing import List, Dict, Any
from pydantic import BaseModel, model_validator
from .service_definition import ServiceDefinition
from .errors import ManifestError
from ..RUNNERS.dependency_resolver import DependencyResolver

class StackManifest(BaseModel):
    """
    Complete configuration for the multi-service stack.
    Equivalent to the generated docker-compose.yml file.
    """
    services: Dict[str, ServiceDefinition]
    volumes: List[str] = []

    @model_validator(mode="after")
    def _check_dependencies(self) -> "StackManifest":
        try:
            DependencyResolver().resolve_order(self.services)
        except ManifestError as e:
            raise ValueError(str(e)) from e
        return self

    @property
    def service_names(self) -> List[str]:
        return list(self.services.keys())

    def startup_order(self) -> List[str]:
        return DependencyResolver().resolve_order(self.services)

    def require_services(self, names: List[str]):
        """
        Ensures the manifest declares every requested service.

        :param names: Service names about to be requested from the platform.
        :raises ManifestError: If one of them is not declared.
        """
        missing = [n for n in names if n not in self.services]
        if missing:
            raise ManifestError(f"Manifest does not declare service(s): {', '.join(missing)}")

    def to_compose(self) -> Dict[str, Any]:
        """
        Converts the manifest into a docker-compose document.
        """
        doc: Dict[str, Any] = {
            "services": {name: svc.to_compose() for name, svc in self.services.items()}
        }
        if self.volumes:
            doc["volumes"] = {name: {} for name in self.volumes}
        return doc
