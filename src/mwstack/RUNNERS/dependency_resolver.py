"""
Dependency resolution for services to determine startup and shutdown order.
"""
from typing import List, Dict, Mapping
from ..MODELS.service_definition import ServiceDefinition
from ..MODELS.errors import ManifestError

class DependencyResolver:
    """
    Resolves the startup and shutdown order of services based on their dependencies.
    """
    def check_references(self, services: Mapping[str, ServiceDefinition]):
        """
        Ensures every dependency names a service of the same manifest.

        :param services: Service definitions keyed by name.
        :raises ManifestError: If a dependency is dangling.
        """
        for name, svc in services.items():
            for dep in svc.depends_on:
                if dep not in services:
                    raise ManifestError(f"Service {name} depends on undefined service {dep}")

    def resolve_order(self, services: Mapping[str, ServiceDefinition]) -> List[str]:
        """
        Determines the correct order to start services using topological sort.
        Ties keep manifest order, so the result is deterministic.

        :param services: Service definitions keyed by name.
        :return: Service names in the order they should be started.
        :raises ManifestError: If a dangling or circular dependency is detected.
        """
        self.check_references(services)
        dependencies = {name: list(svc.depends_on) for name, svc in services.items()}

        ordered = []
        visited = set()
        processing = set()

        def visit(name):
            """
            Recursive function for topological sort.
            """
            if name in processing:
                raise ManifestError(f"Circular dependency detected involving {name}")
            if name not in visited:
                processing.add(name)
                for dep in dependencies[name]:
                    visit(dep)
                processing.remove(name)
                visited.add(name)
                ordered.append(name)

        for name in services:
            visit(name)

        return ordered

    def tiers(self, services: Mapping[str, ServiceDefinition]) -> List[List[str]]:
        """
        Groups services into tiers; every service only depends on earlier tiers.

        :param services: Service definitions keyed by name.
        :return: Tiers of service names, backing services first.
        """
        levels: Dict[str, int] = {}
        for name in self.resolve_order(services):
            deps = services[name].depends_on
            levels[name] = 1 + max((levels[d] for d in deps), default=-1)

        grouped: List[List[str]] = [[] for _ in range(max(levels.values(), default=-1) + 1)]
        for name, level in levels.items():
            grouped[level].append(name)
        return grouped
