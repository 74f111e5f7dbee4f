"""
Shared fixtures: a recording in-memory container platform and a scaffolded project.
"""
import os
import pytest
from mwstack.RUNNERS.compose_platform import ContainerPlatform
from mwstack.MANAGERS.project_layout import ProjectLayout
from mwstack.BUILDERS.scaffold_builder import ScaffoldGenerator

ENV_CONTENT = """# Site configuration
MW_SITE_NAME=TestWiki
MW_SITE_URL=http://wiki.test

MW_ADMIN_USER=admin
MW_ADMIN_PASS=secret-admin

DB_NAME=mediawiki
DB_USER=wikiuser
DB_PASS=wikipass
DB_ROOT_PASS=rootpass
DB_HOST=db

REDIS_HOST=redis
REDIS_PORT=6379

MAIL_HOST=smtp.example.com
MAIL_PORT=587
MAIL_FROM=wiki@example.com
MAIL_USER=wiki@example.com
MAIL_PASS=mail-secret
"""


class FakePlatform(ContainerPlatform):
    """
    Records every request. Building the php service emulates the installer
    by creating the application entry point on the shared web root.
    """

    def __init__(self, web_dir=None, probe_results=None, ready=True):
        self.web_dir = web_dir
        self.probe_results = list(probe_results or [])
        self.ready = ready
        self.calls = []

    def up(self, services=None, detached=True, build=False):
        self.calls.append(("up", list(services or []), build))
        if self.web_dir and build and list(services or []) == ["php"]:
            os.makedirs(self.web_dir, exist_ok=True)
            with open(os.path.join(self.web_dir, "index.php"), "w") as f:
                f.write("<?php\n")

    def exec(self, service, command):
        self.calls.append(("exec", service, list(command)))
        ok = self.probe_results.pop(0) if self.probe_results else self.ready
        return (0, "mysqld is alive") if ok else (1, "connect to server at 'localhost' failed")

    def down(self, volumes=False):
        self.calls.append(("down", volumes))

    def pull(self, services=None):
        self.calls.append(("pull", list(services or [])))

    def ups(self):
        return [c for c in self.calls if c[0] == "up"]

    def execs(self):
        return [c for c in self.calls if c[0] == "exec"]


def snapshot(root):
    """
    Captures every file's bytes and mode, and every directory, under root.
    """
    state = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for d in dirnames:
            state[os.path.relpath(os.path.join(dirpath, d), root) + "/"] = None
        for name in filenames:
            path = os.path.join(dirpath, name)
            with open(path, "rb") as f:
                state[os.path.relpath(path, root)] = (f.read(), os.stat(path).st_mode & 0o777)
    return state


@pytest.fixture
def layout(tmp_path):
    return ProjectLayout(str(tmp_path))


@pytest.fixture
def project(layout):
    """A scaffolded project with a complete .env file."""
    ScaffoldGenerator(layout).generate()
    with open(layout.env_path, "w") as f:
        f.write(ENV_CONTENT)
    return layout


@pytest.fixture
def platform(layout):
    return FakePlatform(web_dir=layout.web_dir)


@pytest.fixture
def sleeps():
    return []
