"""
Utilities for string interpolation using environment variables.
"""
import re
from typing import Mapping

class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in strings.
    Supports $VAR, ${VAR}, ${VAR:-default} and ${VAR:+value}.
    Unset variables render as the empty string, as a shell would.
    """
    PATTERN = re.compile(
        r'\$(?:\{([A-Za-z_][A-Za-z0-9_]*)(?::([-+])([^}]*))?\}|([A-Za-z_][A-Za-z0-9_]*))'
    )

    @staticmethod
    def interpolate(template: str, context: Mapping[str, str]) -> str:
        """
        Interpolates environment variables in the template string using the provided context.

        :param template: The string containing ${VAR} placeholders.
        :param context: The environment variables context.
        :return: The interpolated string.
        """
        def replace(match):
            """
            Internal replacement function for re.sub.
            """
            var_name = match.group(1) or match.group(4)
            modifier = match.group(2)  # None, '-', or '+'
            alt_value = match.group(3) or ''

            value = context.get(var_name) or ''

            if modifier == '-':
                # ${VAR:-default} -> use default if VAR is unset or empty
                return value if value else alt_value
            elif modifier == '+':
                # ${VAR:+value} -> use alt_value if VAR is set and not empty, else empty
                return alt_value if value else ''
            return value

        return EnvironmentInterpolator.PATTERN.sub(replace, template)
