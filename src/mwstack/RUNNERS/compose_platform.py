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
Adapter to the container platform: requests builds, starts, stops and
one-off commands from Docker Compose.
"""
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from ..MODELS.errors import PlatformRequestFailure

logger = logging.getLogger(__name__)


class ContainerPlatform(ABC):
    """
    The narrow interface the lifecycle orchestrator needs from a container platform.
    Requesting an already running service must be a no-op.
    """

    @abstractmethod
    def up(self, services: Optional[Sequence[str]] = None, detached: bool = True, build: bool = False):
        """Create and start services; all services when none are named."""

    @abstractmethod
    def exec(self, service: str, command: Sequence[str]) -> Tuple[int, str]:
        """Run a command inside a running service, returning (exit code, output)."""

    @abstractmethod
    def down(self, volumes: bool = False):
        """Stop and remove the stack's containers, and its volumes if asked."""

    @abstractmethod
    def pull(self, services: Optional[Sequence[str]] = None):
        """Pull newer images for image-based services."""


class DockerComposePlatform(ContainerPlatform):
    """
    ContainerPlatform backed by the `docker compose` CLI.
    """

    def __init__(self,
                 project_dir: str,
                 compose_file: str,
                 env_file: Optional[str] = None,
                 executable: Sequence[str] = ("docker", "compose")):
        """
        Initializes the adapter.

        Args:
            project_dir (str): Project directory compose resolves relative paths against.
            compose_file (str): Path to the stack manifest.
            env_file (Optional[str]): Environment file used for ${VAR} interpolation.
            executable (Sequence[str]): The compose command.
        """
        self.project_dir = project_dir
        self.compose_file = compose_file
        self.env_file = env_file
        self.executable = list(executable)

    def base_command(self) -> List[str]:
        command = self.executable + ["-f", self.compose_file, "--project-directory", self.project_dir]
        if self.env_file:
            command += ["--env-file", self.env_file]
        return command

    def _request(self, args: List[str]):
        """
        Runs a compose request with output streamed to the operator.

        Raises:
            PlatformRequestFailure: If compose exits non-zero.
        """
        command = self.base_command() + args
        logger.debug("Running: %s", " ".join(command))
        # Avoid shell=True for security reasons (CWE-78)
        result = subprocess.run(command, cwd=self.project_dir, shell=False)
        if result.returncode != 0:
            raise PlatformRequestFailure(command, result.returncode)

    def up(self, services: Optional[Sequence[str]] = None, detached: bool = True, build: bool = False):
        args = ["up"]
        if detached:
            args.append("-d")
        if build:
            args.append("--build")
        self._request(args + list(services or []))

    def exec(self, service: str, command: Sequence[str]) -> Tuple[int, str]:
        full = self.base_command() + ["exec", "-T", service] + list(command)
        logger.debug("Running: %s %s", " ".join(self.base_command()), f"exec -T {service} ...")
        result = subprocess.run(
            full,
            cwd=self.project_dir,
            capture_output=True,
            text=True,
            shell=False,
        )
        return result.returncode, (result.stdout or "") + (result.stderr or "")

    def down(self, volumes: bool = False):
        args = ["down"]
        if volumes:
            args.append("--volumes")
        self._request(args)

    def pull(self, services: Optional[Sequence[str]] = None):
        self._request(["pull", "--ignore-buildable"] + list(services or []))
