# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Parsers for the generated docker-compose.yml stack manifest.
"""
import yaml
from typing import Dict, Any
from pydantic import ValidationError
from ..MODELS.stack_manifest import StackManifest
from ..MODELS.service_definition import ServiceDefinition, VolumeMount
from ..MODELS.errors import ManifestError
import os

class ComposeParser:
    """
    Parser for docker-compose.yml files.
    ${VAR} placeholders are kept as-is; compose resolves them at request time.
    """
    def parse(self, compose_path: str) -> StackManifest:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file.
        :return: Parsed manifest.
        :raises ManifestError: If the file is missing or invalid.
        """
        if not os.path.isfile(compose_path):
            raise ManifestError(f"Stack manifest {compose_path} not found. Run with --first-time first.")
        with open(compose_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> StackManifest:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :return: Parsed manifest.
        :raises ManifestError: If the YAML or the manifest invariants are invalid.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid stack manifest: {e}") from e
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise ManifestError("Invalid stack manifest: top level must be a mapping")

        try:
            services = {}
            for name, spec in (data.get('services') or {}).items():
                services[name] = self._parse_service(name, spec or {})

            return StackManifest(
                services=services,
                volumes=list(data.get('volumes') or {}),
            )
        except (ValidationError, ValueError, KeyError, TypeError) as e:
            raise ManifestError(f"Invalid stack manifest: {e}") from e

    def _parse_service(self, name: str, spec: Dict[str, Any]) -> ServiceDefinition:
        """
        Parses a single service definition from a compose file.

        :param name: The name of the service.
        :param spec: The service specification dictionary.
        :return: A ServiceDefinition instance.
        """
        # Volumes
        volumes = []
        for v in spec.get('volumes', []):
            if isinstance(v, str):
                parts = v.split(':')
                if len(parts) == 2:
                    volumes.append(VolumeMount(source=parts[0], target=parts[1]))
                elif len(parts) == 3:
                    volumes.append(VolumeMount(source=parts[0], target=parts[1], read_only=(parts[2] == 'ro')))
            elif isinstance(v, dict):
                volumes.append(VolumeMount(
                    source=v.get('source', ''),
                    target=v.get('target', ''),
                    read_only=bool(v.get('read_only', False)),
                ))

        # Ports
        ports = {}
        for p in spec.get('ports', []):
            if isinstance(p, str):
                parts = p.split(':')
                if len(parts) == 2:
                    ports[int(parts[1])] = int(parts[0])
                else:
                    ports[int(parts[0])] = int(parts[0])
            elif isinstance(p, dict):
                ports[int(p['target'])] = int(p.get('published', p['target']))

        # Environment
        environment = {}
        env_spec = spec.get('environment', [])
        if isinstance(env_spec, list):
            for e in env_spec:
                if '=' in e:
                    k, v = e.split('=', 1)
                    environment[k] = v
        elif isinstance(env_spec, dict):
            environment = {k: '' if v is None else str(v) for k, v in env_spec.items()}

        build = spec.get('build')
        depends_on = spec.get('depends_on', [])

        return ServiceDefinition(
            name=name,
            image=spec.get('image'),
            build_context=build.get('context') if isinstance(build, dict) else build,
            depends_on=list(depends_on.keys()) if isinstance(depends_on, dict) else list(depends_on),
            volumes=volumes,
            ports=ports,
            environment=environment,
            restart=spec.get('restart'),
        )
