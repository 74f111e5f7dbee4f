"""
Lifecycle phases selectable from the command line.
"""
from enum import Enum


class Phase(str, Enum):
    """
    One lifecycle phase; exactly one is selected per invocation.
    """

    HELP = "help"
    SCAFFOLD = "scaffold"
    START = "start"
    REBOOT = "reboot"
    RESET = "reset"
    UPDATE = "update"

    @property
    def flag(self) -> str:
        return _FLAGS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_FLAGS = {
    Phase.HELP: "--help",
    Phase.SCAFFOLD: "--first-time",
    Phase.START: "--start",
    Phase.REBOOT: "--reboot",
    Phase.RESET: "--reset",
    Phase.UPDATE: "--update",
}

_DESCRIPTIONS = {
    Phase.HELP: "Show this help message",
    Phase.SCAFFOLD: "Create full project structure from scratch",
    Phase.START: "Start the MediaWiki stack",
    Phase.REBOOT: "Restart all services cleanly",
    Phase.RESET: "Remove containers, clean volumes and reinitialize",
    Phase.UPDATE: "Pull new images and preserve database/files",
}
