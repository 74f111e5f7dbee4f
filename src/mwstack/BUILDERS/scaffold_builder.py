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
Generation of the on-disk project layout: directories, stack manifest,
build recipes and config templates.
"""
import logging
import os
from typing import Callable, Dict, List, Optional, Tuple

import click
import yaml
from jinja2 import Environment, StrictUndefined

from ..MODELS.errors import AbortedByUser
from ..MODELS.scaffold_settings import ScaffoldSettings
from ..MANAGERS.project_layout import ProjectLayout, SERVICE_DIRS, LOGS_DIR, WEB_DIR, PROD_DIR
from . import templates
from .topology import build_topology

logger = logging.getLogger(__name__)

MANIFEST_HEADER = "# Generated by mwstack --first-time. Regenerate instead of editing by hand.\n"

# (relative path, template, file mode)
ARTIFACTS: List[Tuple[str, str, int]] = [
    (".env.example", templates.ENV_EXAMPLE_TEMPLATE, 0o644),
    ("prod/nginx/nginx.conf", templates.NGINX_CONF_TEMPLATE, 0o644),
    ("prod/msmtp/Dockerfile", templates.MSMTP_DOCKERFILE_TEMPLATE, 0o644),
    ("prod/msmtp/msmtprc.template", templates.MSMTPRC_TEMPLATE, 0o644),
    ("prod/jobrunner/Dockerfile", templates.JOBRUNNER_DOCKERFILE_TEMPLATE, 0o644),
    ("prod/php-fpm/Dockerfile", templates.PHP_FPM_DOCKERFILE_TEMPLATE, 0o644),
    ("prod/php-fpm/install-mediawiki.sh", templates.INSTALL_MEDIAWIKI_TEMPLATE, 0o755),
    ("prod/parsoid/Dockerfile", templates.PARSOID_DOCKERFILE_TEMPLATE, 0o644),
]

class ScaffoldGenerator:
    """
    Materializes the project layout from fixed in-memory templates.
    Regeneration over an existing layout is destructive and needs confirmation.
    """
    def __init__(self,
                 layout: ProjectLayout,
                 settings: Optional[ScaffoldSettings] = None,
                 confirm: Optional[Callable[[str], bool]] = None):
        """
        Initializes the generator.

        :param layout: Paths of the project to generate.
        :param settings: Structural settings baked into the artifacts.
        :param confirm: Asks the operator a yes/no question.
        """
        self.layout = layout
        self.settings = settings or ScaffoldSettings()
        self.confirm = confirm
        self.jinja = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def render_manifest(self) -> str:
        """
        Serializes the fixed topology as a docker-compose document.
        """
        manifest = build_topology(self.settings)
        body = yaml.safe_dump(manifest.to_compose(), sort_keys=False, default_flow_style=False)
        return MANIFEST_HEADER + body

    def render_artifacts(self) -> Dict[str, Tuple[str, int]]:
        """
        Renders every file of the layout in memory.

        :return: Content and mode keyed by path relative to the project root.
        """
        context = self.settings.template_context()
        rendered = {
            "docker-compose.yml": (self.render_manifest(), 0o644),
        }
        for rel_path, source, mode in ARTIFACTS:
            rendered[rel_path] = (self.jinja.from_string(source).render(**context), mode)
        return rendered

    def directories(self) -> List[str]:
        return [os.path.join(PROD_DIR, name) for name in SERVICE_DIRS] + [LOGS_DIR, WEB_DIR]

    def generate(self, force_confirm: bool = False) -> ProjectLayout:
        """
        Generates the project layout.

        :param force_confirm: Regenerate over an existing layout without asking.
        :return: The generated layout.
        :raises AbortedByUser: If regeneration was declined; nothing is touched.
        """
        # Render before touching the disk so a template error leaves the old layout intact.
        rendered = self.render_artifacts()

        if self.layout.exists():
            click.echo("Warning: Project directories or files already exist.")
            if not force_confirm:
                question = "Do you want to delete existing files and regenerate everything?"
                if self.confirm is None or not self.confirm(question):
                    raise AbortedByUser("Aborting. Please clean up manually or run with --reset.")
            click.echo("Cleaning up old project structure...")
            self.layout.remove()

        for rel_dir in self.directories():
            os.makedirs(self.layout.path(rel_dir), exist_ok=True)

        for rel_path, (content, mode) in rendered.items():
            target = self.layout.path(rel_path)
            click.echo(f"Writing {rel_path}...")
            with open(target, 'w') as f:
                f.write(content)
            os.chmod(target, mode)
            logger.debug("Wrote %s (%o)", target, mode)

        return self.layout
