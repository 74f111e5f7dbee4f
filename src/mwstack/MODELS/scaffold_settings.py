"""
Structural settings resolved when the project layout is generated.
"""
from pydantic import BaseModel, ValidationError
from .environment import StackEnvironment
from .errors import MissingConfiguration

class ScaffoldSettings(BaseModel):
    """
    Ports, paths and versions baked into the generated artifacts.
    """
    http_port: int = 80
    parsoid_port: int = 8000
    php_fpm_port: int = 9000
    mw_version: str = "1.43.1"
    php_version: str = "8.2"
    web_root: str = "/var/www/html"

    @property
    def mw_branch(self) -> str:
        """Release branch of the MediaWiki version, e.g. 1.43 for 1.43.1."""
        return ".".join(self.mw_version.split(".")[:2])

    @classmethod
    def from_environment(cls, env: StackEnvironment) -> "ScaffoldSettings":
        """
        Builds settings from optional HTTP_PORT, PARSOID_PORT and MW_VERSION keys.
        """
        overrides = {}
        for key, field in (("HTTP_PORT", "http_port"),
                           ("PARSOID_PORT", "parsoid_port"),
                           ("MW_VERSION", "mw_version")):
            value = env.values.get(key)
            if value:
                overrides[field] = value
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise MissingConfiguration(f"Invalid scaffold setting in environment: {e}") from e

    def template_context(self) -> dict:
        context = self.model_dump()
        context["mw_branch"] = self.mw_branch
        return context
