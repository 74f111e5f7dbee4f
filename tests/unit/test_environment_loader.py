"""
Unit tests for loading the environment file into a StackEnvironment.
"""
import pytest
from pydantic import ValidationError
from mwstack.MANAGERS.environment_manager import EnvironmentLoader
from mwstack.MODELS.environment import StackEnvironment, REQUIRED_KEYS
from mwstack.MODELS.errors import MissingConfiguration
from conftest import ENV_CONTENT


class TestEnvironmentLoader:
    """Tests for EnvironmentLoader."""

    def test_missing_file(self, tmp_path):
        """A missing file is a MissingConfiguration error."""
        with pytest.raises(MissingConfiguration) as exc:
            EnvironmentLoader().load(str(tmp_path / ".env"))
        assert ".env.example" in str(exc.value)

    def test_load(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(ENV_CONTENT)
        env = EnvironmentLoader().load(str(env_file))
        assert env.values['DB_USER'] == 'wikiuser'
        assert env.source == str(env_file)
        assert env.missing_keys() == []

    def test_load_optional_without_file(self, tmp_path):
        env = EnvironmentLoader().load_optional(str(tmp_path / ".env"))
        assert env.values == {}


class TestStackEnvironment:
    """Tests for defaults and required keys."""

    def test_defaults(self):
        env = StackEnvironment(values={'MW_SITE_NAME': 'Docs'})
        assert env.get('MW_SITE_NAME') == 'Docs'
        assert env.get('MW_SITE_URL') == 'http://localhost'
        assert env.get('UNKNOWN') is None

    def test_effective_overlays_file_values(self):
        env = StackEnvironment(values={'REDIS_PORT': '6380', 'EXTRA': 'x'})
        effective = env.effective()
        assert effective['REDIS_PORT'] == '6380'
        assert effective['DB_HOST'] == 'db'
        assert effective['EXTRA'] == 'x'

    def test_empty_value_falls_back_to_default(self):
        env = StackEnvironment(values={'DB_HOST': ''})
        assert env.effective()['DB_HOST'] == 'db'

    def test_require_lists_missing_keys(self):
        env = StackEnvironment(values={'DB_USER': 'wikiuser', 'DB_PASS': ''}, source='.env')
        with pytest.raises(MissingConfiguration) as exc:
            env.require()
        assert 'DB_PASS' in exc.value.missing_keys
        assert 'DB_USER' not in exc.value.missing_keys
        assert set(exc.value.missing_keys) == set(REQUIRED_KEYS) - {'DB_USER'}

    def test_is_immutable(self):
        env = StackEnvironment(values={'A': '1'})
        with pytest.raises(ValidationError):
            env.values = {}
