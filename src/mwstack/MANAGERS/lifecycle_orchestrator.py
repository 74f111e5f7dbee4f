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
Lifecycle orchestration for the stack: one phase per invocation, run to
completion or fatal failure.
"""
import logging
import os
from typing import Callable, Dict, Optional

import click

from ..MODELS.phase import Phase
from ..MODELS.environment import StackEnvironment
from ..MODELS.readiness_probe import ReadinessProbe
from ..MODELS.scaffold_settings import ScaffoldSettings
from ..MODELS.stack_manifest import StackManifest
from ..MODELS.errors import AbortedByUser, LayoutError
from ..PARSERS.compose_parser import ComposeParser
from ..BUILDERS.scaffold_builder import ScaffoldGenerator
from ..BUILDERS.topology import BACKING_SERVICES, DEPENDENT_SERVICES, APP_SERVICE, DB_SERVICE
from ..RUNNERS.compose_platform import ContainerPlatform, DockerComposePlatform
from .environment_manager import EnvironmentLoader
from .config_renderer import ConfigRenderer
from .project_layout import ProjectLayout, LayoutStatus
from .readiness_prober import ReadinessProber

logger = logging.getLogger(__name__)

USAGE_ORDER = [Phase.SCAFFOLD, Phase.RESET, Phase.UPDATE, Phase.START, Phase.REBOOT, Phase.HELP]


def usage_text(prog: str = "mwstack") -> str:
    """
    Builds the usage message listing every phase.
    """
    lines = [f"Usage: {prog} [OPTION]", "", "Options:"]
    for phase in USAGE_ORDER:
        lines.append(f"  {phase.flag:<16} {phase.description}")
    lines.append(f"  {'(no args)':<16} Same as --help")
    lines += [
        "",
        "Settings:",
        f"  {'--project-dir':<16} Project root (default: current directory)",
        f"  {'--env-file':<16} Environment file (default: <project-dir>/.env)",
        f"  {'-y, --yes':<16} Do not ask before destructive actions",
        f"  {'-v, --verbose':<16} Debug logging",
    ]
    return "\n".join(lines)


class LifecycleOrchestrator:
    """
    Dispatches a lifecycle phase and sequences the stack's dependency-ordered
    bring-up and tear-down. Holds no state between invocations.
    """

    DB_PROBE_ATTEMPTS = 10
    DB_PROBE_INTERVAL = 2.0

    def __init__(self,
                 layout: ProjectLayout,
                 env_file: Optional[str] = None,
                 platform: Optional[ContainerPlatform] = None,
                 confirm: Optional[Callable[[str], bool]] = None,
                 assume_yes: bool = False,
                 prober: Optional[ReadinessProber] = None,
                 loader: Optional[EnvironmentLoader] = None,
                 renderer: Optional[ConfigRenderer] = None):
        """
        Initializes the orchestrator.

        :param layout: The project's on-disk layout.
        :param env_file: Environment file, defaults to the project's .env.
        :param platform: Container platform; docker compose when not given.
        :param confirm: Asks the operator a yes/no question.
        :param assume_yes: Treat destructive confirmations as already given.
        :param prober: Readiness prober used to gate dependent services.
        """
        self.layout = layout
        self.env_file = env_file or layout.env_path
        self._platform = platform
        self.confirm = confirm
        self.assume_yes = assume_yes
        self.prober = prober or ReadinessProber()
        self.loader = loader or EnvironmentLoader()
        self.renderer = renderer or ConfigRenderer()
        self.handlers: Dict[Phase, Callable[[], None]] = {
            Phase.HELP: self.help,
            Phase.SCAFFOLD: self.scaffold,
            Phase.START: self.start,
            Phase.REBOOT: self.reboot,
            Phase.RESET: self.reset,
            Phase.UPDATE: self.update,
        }
        missing = set(Phase) - set(self.handlers)
        if missing:
            raise NotImplementedError(f"No handler for phase(s): {sorted(p.value for p in missing)}")

    @property
    def platform(self) -> ContainerPlatform:
        if self._platform is None:
            env_file = self.env_file if os.path.isfile(self.env_file) else None
            self._platform = DockerComposePlatform(self.layout.root, self.layout.manifest_path, env_file)
        return self._platform

    def run(self, phase: Phase):
        """
        Runs one phase to completion.

        :param phase: The selected phase.
        :raises StackError: On any fatal failure.
        """
        logger.debug("Running phase %s in %s", phase.value, self.layout.root)
        self.handlers[phase]()

    # Phases

    def help(self):
        click.echo(usage_text())

    def scaffold(self):
        click.echo("Bootstrapping project structure...")
        self._generator().generate(force_confirm=self.assume_yes)
        click.echo("Project structure created. Copy .env.example to .env, then run mwstack --start to launch your stack.")

    def start(self):
        click.echo("Starting MediaWiki Docker stack...")
        env = self._bring_up(fresh_install=True)
        click.echo(f"All services started. Visit your wiki at {env.get('MW_SITE_URL')}")

    def update(self):
        click.echo("Updating MediaWiki Docker stack...")
        env = self._bring_up(fresh_install=False, pull=True)
        click.echo(f"All services updated. Visit your wiki at {env.get('MW_SITE_URL')}")

    def reboot(self):
        # No readiness gating after the restart; compose's depends_on is the only ordering.
        click.echo("Rebooting MediaWiki stack...")
        self._load_manifest()
        env = self.loader.load_optional(self.env_file)
        self.platform.down()
        self.platform.up(build=True)
        click.echo(f"All services restarted. Visit your wiki at {env.get('MW_SITE_URL')}")

    def reset(self):
        click.echo("Resetting MediaWiki stack...")
        generator = self._generator()
        if not self.assume_yes:
            question = ("This removes all containers, volumes (including the database) "
                        "and regenerates the project. Continue?")
            if self.confirm is None or not self.confirm(question):
                raise AbortedByUser("Aborting reset. Nothing was changed.")

        if os.path.isfile(self.layout.manifest_path):
            click.echo("Removing containers and volumes...")
            self.platform.down(volumes=True)

        generator.generate(force_confirm=True)
        click.echo("Project reinitialized. Run mwstack --start to launch your stack.")

    # Steps

    def _generator(self) -> ScaffoldGenerator:
        settings = ScaffoldSettings.from_environment(self.loader.load_optional(self.env_file))
        return ScaffoldGenerator(self.layout, settings=settings, confirm=self.confirm)

    def _load_manifest(self) -> StackManifest:
        """
        Reads the stack manifest of a complete layout.

        :raises LayoutError: If the layout is absent or partial.
        """
        status = self.layout.status()
        if status is LayoutStatus.ABSENT:
            raise LayoutError("No project layout found. Run mwstack --first-time first.")
        if status is LayoutStatus.PARTIAL:
            missing = ", ".join(self.layout.relpath(p) for p in self.layout.missing_artifacts())
            raise LayoutError(
                f"Project layout is incomplete (missing: {missing}). "
                "Regenerate it with mwstack --first-time or mwstack --reset."
            )
        return ComposeParser().parse(self.layout.manifest_path)

    def database_probe(self, env: StackEnvironment) -> ReadinessProbe:
        """
        Builds the probe that authenticates against the database with the configured credentials.
        """
        command = ["mysqladmin", "ping", f"-u{env.get('DB_USER')}", f"-p{env.get('DB_PASS')}", "--silent"]

        def check() -> bool:
            code, _ = self.platform.exec(DB_SERVICE, command)
            return code == 0

        return ReadinessProbe(
            name="database",
            check=check,
            interval=self.DB_PROBE_INTERVAL,
            max_attempts=self.DB_PROBE_ATTEMPTS,
            hint="Check credentials or container logs (docker compose logs db).",
        )

    def _bring_up(self, fresh_install: bool, pull: bool = False) -> StackEnvironment:
        """
        Brings the stack up in tiers: backing services, readiness gate, then the rest.

        :param fresh_install: Request the one-time application install when its entry point is absent.
        :param pull: Pull newer images first and rebuild local images.
        :return: The environment used.
        """
        env = self.loader.load(self.env_file).require()
        manifest = self._load_manifest()
        manifest.require_services(BACKING_SERVICES + DEPENDENT_SERVICES)

        click.echo("Generating msmtp configuration...")
        self.renderer.render_file(
            self.layout.msmtp_template,
            self.layout.msmtp_config,
            env.effective(),
            secret=True,
        )

        if pull:
            click.echo("Pulling newer images (volumes are preserved)...")
            self.platform.pull()

        click.echo("Bootstrapping database and Redis cache...")
        self.platform.up(BACKING_SERVICES)

        click.echo("Waiting for database inside db container...")
        attempts = self.prober.wait_until_ready(self.database_probe(env))
        logger.debug("Database ready after %d attempt(s)", attempts)

        if fresh_install:
            if not os.path.isfile(self.layout.entry_point):
                click.echo("No MediaWiki found in web/. Proceeding with fresh install...")
                self.platform.up([APP_SERVICE], build=True)
            else:
                click.echo("MediaWiki files found. Skipping fresh install.")

        click.echo(f"Starting full stack ({', '.join(DEPENDENT_SERVICES)})...")
        self.platform.up(DEPENDENT_SERVICES, build=pull)
        return env
