"""
Loading of the stack's environment file into an explicit configuration object.
"""
import logging
import os
from ..PARSERS.env_parser import EnvParser
from ..MODELS.environment import StackEnvironment
from ..MODELS.errors import MissingConfiguration

logger = logging.getLogger(__name__)

class EnvironmentLoader:
    """
    Reads a key=value environment file into a StackEnvironment.
    """
    def __init__(self, parser: EnvParser = None):
        """
        Initializes the loader.

        :param parser: Parser used for the file contents.
        """
        self.parser = parser or EnvParser()

    def exists(self, env_path: str) -> bool:
        return os.path.isfile(env_path)

    def load(self, env_path: str) -> StackEnvironment:
        """
        Loads the environment file.

        :param env_path: Path to the .env file.
        :return: The parsed configuration.
        :raises MissingConfiguration: If the file does not exist.
        """
        if not self.exists(env_path):
            raise MissingConfiguration(
                f"{env_path} file not found. Please copy .env.example to .env "
                "and configure your environment variables."
            )
        values = self.parser.parse(env_path)
        logger.debug("Loaded %d keys from %s", len(values), env_path)
        return StackEnvironment(values=values, source=env_path)

    def load_optional(self, env_path: str) -> StackEnvironment:
        """
        Loads the environment file if present, otherwise returns an empty configuration.
        """
        if not self.exists(env_path):
            return StackEnvironment()
        return self.load(env_path)
