"""
Rendering of config templates into concrete files, with owner-only
permissions for files that carry credentials.
"""
import logging
import os
from typing import Mapping
from ..UTILS.string_interpolation import EnvironmentInterpolator

logger = logging.getLogger(__name__)

SECRET_FILE_MODE = 0o600

class ConfigRenderer:
    """
    Emits rendered config files from ${VAR} templates.
    """
    def __init__(self, interpolator: EnvironmentInterpolator = None):
        self.interpolator = interpolator or EnvironmentInterpolator()

    def render(self, template: str, context: Mapping[str, str]) -> str:
        return self.interpolator.interpolate(template, context)

    def render_file(self,
                    template_path: str,
                    output_path: str,
                    context: Mapping[str, str],
                    secret: bool = False) -> str:
        """
        Renders a template file to an output file.

        :param template_path: Path of the ${VAR} template.
        :param output_path: Path of the file to write.
        :param context: Variables to substitute.
        :param secret: Restrict the output to owner read/write.
        :return: The output path.
        """
        with open(template_path, 'r') as f:
            content = self.render(f.read(), context)

        if secret:
            # Create with the final mode so the file is never readable by others.
            fd = os.open(output_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SECRET_FILE_MODE)
            with os.fdopen(fd, 'w') as f:
                f.write(content)
            os.chmod(output_path, SECRET_FILE_MODE)
        else:
            with open(output_path, 'w') as f:
                f.write(content)

        logger.debug("Rendered %s -> %s (secret=%s)", template_path, output_path, secret)
        return output_path
