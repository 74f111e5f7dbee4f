"""
Model for the environment configuration loaded from the stack's .env file.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict
from .errors import MissingConfiguration

DEFAULTS: Dict[str, str] = {
    "MW_SITE_NAME": "MyWiki",
    "MW_SITE_LANG": "en",
    "MW_SITE_URL": "http://localhost",
    "MW_SITE_HOST": "localhost",
    "MW_ADMIN_USER": "admin",
    "DB_NAME": "mediawiki",
    "DB_HOST": "db",
    "REDIS_HOST": "redis",
    "REDIS_PORT": "6379",
}

REQUIRED_KEYS: List[str] = [
    "MW_ADMIN_PASS",
    "DB_USER",
    "DB_PASS",
    "DB_ROOT_PASS",
    "MAIL_HOST",
    "MAIL_PORT",
    "MAIL_FROM",
    "MAIL_USER",
    "MAIL_PASS",
]

class StackEnvironment(BaseModel):
    """
    Immutable key/value configuration for one invocation.
    Built once by the environment loader and passed to every component that needs it.
    """
    model_config = ConfigDict(frozen=True)

    values: Dict[str, str] = {}
    source: Optional[str] = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Looks a key up, falling back to its documented default.
        """
        value = self.values.get(key)
        if value:
            return value
        if default is not None:
            return default
        return DEFAULTS.get(key)

    def effective(self) -> Dict[str, str]:
        """
        Returns the documented defaults overlaid with the file's values.
        """
        merged = dict(DEFAULTS)
        merged.update({k: v for k, v in self.values.items() if v or k not in DEFAULTS})
        return merged

    def missing_keys(self, required: Optional[List[str]] = None) -> List[str]:
        keys = REQUIRED_KEYS if required is None else required
        return [k for k in keys if not self.get(k)]

    def require(self, required: Optional[List[str]] = None) -> "StackEnvironment":
        """
        Checks that every required key is present and non-empty.

        :param required: Keys to check, defaults to REQUIRED_KEYS.
        :return: self, for chaining.
        :raises MissingConfiguration: If any key is unset.
        """
        missing = self.missing_keys(required)
        if missing:
            where = f" in {self.source}" if self.source else ""
            raise MissingConfiguration(
                f"Required configuration key(s) not set{where}: {', '.join(missing)}",
                missing_keys=missing,
            )
        return self
