"""
On-disk layout of a stack project: where every generated artifact lives.
"""
import os
import shutil
from enum import Enum
from typing import List

PROD_DIR = "prod"
WEB_DIR = "web"
LOGS_DIR = "logs"
MANIFEST_FILE = "docker-compose.yml"
ENV_FILE = ".env"
ENV_EXAMPLE_FILE = ".env.example"

# One directory per service that carries a build recipe or config template.
SERVICE_DIRS = ["php-fpm", "nginx", "jobrunner", "msmtp", "parsoid"]


class LayoutStatus(str, Enum):
    ABSENT = "absent"
    COMPLETE = "complete"
    PARTIAL = "partial"


class ProjectLayout:
    """
    Paths of a stack project rooted at one directory.
    """

    def __init__(self, root: str = "."):
        self.root = os.path.abspath(root)

    def path(self, *parts: str) -> str:
        return os.path.join(self.root, *parts)

    @property
    def prod_dir(self) -> str:
        return self.path(PROD_DIR)

    @property
    def web_dir(self) -> str:
        return self.path(WEB_DIR)

    @property
    def logs_dir(self) -> str:
        return self.path(LOGS_DIR)

    @property
    def manifest_path(self) -> str:
        return self.path(MANIFEST_FILE)

    @property
    def env_path(self) -> str:
        return self.path(ENV_FILE)

    @property
    def env_example_path(self) -> str:
        return self.path(ENV_EXAMPLE_FILE)

    @property
    def entry_point(self) -> str:
        """Web application entry point on the shared web-root volume."""
        return self.path(WEB_DIR, "index.php")

    @property
    def msmtp_template(self) -> str:
        return self.path(PROD_DIR, "msmtp", "msmtprc.template")

    @property
    def msmtp_config(self) -> str:
        return self.path(PROD_DIR, "msmtp", "msmtprc")

    def service_dir(self, name: str) -> str:
        return self.path(PROD_DIR, name)

    def top_level_artifacts(self) -> List[str]:
        """
        Artifacts whose presence means a layout already exists.
        """
        return [self.prod_dir, self.web_dir, self.manifest_path]

    def required_artifacts(self) -> List[str]:
        """
        Everything Start needs to find on disk.
        """
        return self.top_level_artifacts() + [self.service_dir(name) for name in SERVICE_DIRS] + [
            self.msmtp_template,
        ]

    def exists(self) -> bool:
        return any(os.path.exists(p) for p in self.top_level_artifacts())

    def missing_artifacts(self) -> List[str]:
        return [p for p in self.required_artifacts() if not os.path.exists(p)]

    def status(self) -> LayoutStatus:
        """
        Classifies the layout as absent, complete or partial.
        """
        if not self.exists():
            return LayoutStatus.ABSENT
        if self.missing_artifacts():
            return LayoutStatus.PARTIAL
        return LayoutStatus.COMPLETE

    def remove(self):
        """
        Removes every top-level artifact of the layout.
        """
        for p in self.top_level_artifacts():
            if os.path.isdir(p) and not os.path.islink(p):
                shutil.rmtree(p)
            elif os.path.lexists(p):
                os.remove(p)

    def relpath(self, p: str) -> str:
        return os.path.relpath(p, self.root)
