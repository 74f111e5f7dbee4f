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
Unit tests for project scaffolding.
"""
import os
import stat
import pytest
from mwstack.BUILDERS.scaffold_builder import ScaffoldGenerator
from mwstack.MANAGERS.project_layout import LayoutStatus
from mwstack.MODELS.scaffold_settings import ScaffoldSettings
from mwstack.MODELS.errors import AbortedByUser, MissingConfiguration
from mwstack.MODELS.environment import REQUIRED_KEYS, StackEnvironment
from mwstack.PARSERS.compose_parser import ComposeParser
from mwstack.PARSERS.env_parser import EnvParser
from conftest import snapshot


class TestScaffoldGenerator:
    """Tests for ScaffoldGenerator."""

    def test_generate_fresh(self, layout):
        """A fresh project gets the complete layout without any question."""
        asked = []
        ScaffoldGenerator(layout, confirm=asked.append).generate()

        assert asked == []
        assert layout.status() is LayoutStatus.COMPLETE
        assert os.path.isdir(layout.web_dir)
        assert os.path.isdir(layout.logs_dir)
        assert os.path.isfile(layout.env_example_path)

    def test_generate_twice_is_byte_identical(self, layout):
        ScaffoldGenerator(layout).generate()
        first = snapshot(layout.root)

        ScaffoldGenerator(layout, confirm=lambda q: True).generate()

        assert snapshot(layout.root) == first

    def test_regeneration_removes_stale_files(self, layout):
        ScaffoldGenerator(layout).generate()
        stale = os.path.join(layout.web_dir, "index.php")
        with open(stale, "w") as f:
            f.write("<?php")

        ScaffoldGenerator(layout).generate(force_confirm=True)

        assert not os.path.exists(stale)

    def test_decline_leaves_tree_untouched(self, layout):
        ScaffoldGenerator(layout).generate()
        with open(os.path.join(layout.web_dir, "index.php"), "w") as f:
            f.write("<?php")
        before = snapshot(layout.root)
        questions = []

        def decline(question):
            questions.append(question)
            return False

        with pytest.raises(AbortedByUser):
            ScaffoldGenerator(layout, settings=ScaffoldSettings(http_port=9999), confirm=decline).generate()

        assert len(questions) == 1
        assert snapshot(layout.root) == before

    def test_existing_layout_without_confirm_callback_aborts(self, layout):
        os.makedirs(layout.prod_dir)
        with pytest.raises(AbortedByUser):
            ScaffoldGenerator(layout).generate()
        assert os.listdir(layout.root) == ["prod"]

    def test_partial_layout_counts_as_existing(self, layout):
        with open(layout.manifest_path, "w") as f:
            f.write("services: {}\n")
        assert layout.status() is LayoutStatus.PARTIAL
        with pytest.raises(AbortedByUser):
            ScaffoldGenerator(layout, confirm=lambda q: False).generate()

    def test_manifest_uses_structural_settings(self, layout):
        ScaffoldGenerator(layout, settings=ScaffoldSettings(http_port=8080)).generate()

        manifest = ComposeParser().parse(layout.manifest_path)

        assert manifest.services['nginx'].ports == {80: 8080}
        assert manifest.services['php'].depends_on == ['db']
        assert manifest.volumes == ['db_data']

    def test_secrets_stay_placeholders(self, layout):
        ScaffoldGenerator(layout).generate()
        with open(layout.msmtp_template) as f:
            content = f.read()
        assert "${MAIL_PASS}" in content
        with open(layout.manifest_path) as f:
            assert "${DB_ROOT_PASS}" in f.read()

    def test_installer_is_idempotent_and_executable(self, layout):
        ScaffoldGenerator(layout, settings=ScaffoldSettings(mw_version="1.42.3")).generate()
        installer = layout.path("prod", "php-fpm", "install-mediawiki.sh")
        with open(installer) as f:
            script = f.read()

        assert stat.S_IMODE(os.stat(installer).st_mode) == 0o755
        assert 'MARKER="$WEB_ROOT/LocalSettings.php"' in script
        assert script.index('if [ -f "$MARKER" ]') < script.index("maintenance/install.php")
        assert "mediawiki/1.42/mediawiki-1.42.3.tar.gz" in script
        assert "{{" not in script

    def test_env_example_is_a_complete_environment(self, layout):
        ScaffoldGenerator(layout).generate()
        values = EnvParser.parse(layout.env_example_path)
        assert StackEnvironment(values=values).missing_keys(REQUIRED_KEYS) == []

    def test_settings_from_environment(self):
        env = StackEnvironment(values={'HTTP_PORT': '8081', 'MW_VERSION': '1.44.0'})
        settings = ScaffoldSettings.from_environment(env)
        assert settings.http_port == 8081
        assert settings.parsoid_port == 8000
        assert settings.mw_branch == "1.44"

    def test_invalid_setting_is_a_configuration_error(self):
        with pytest.raises(MissingConfiguration, match="Invalid scaffold setting"):
            ScaffoldSettings.from_environment(StackEnvironment(values={'HTTP_PORT': 'eighty'}))
