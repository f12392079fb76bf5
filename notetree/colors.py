"""ANSI color helpers for labels and status lines."""

import re

_ANSI_PATTERN = re.compile(r"\033\[[0-9;]*m")


class Colors:
    """ANSI color codes for terminal output."""
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    WHITE = '\033[97m'
    BOLD = '\033[1m'
    END = '\033[0m'


def paint(text: str, color: str) -> str:
    """Wrap text in a color code and reset afterwards."""
    return f"{color}{text}{Colors.END}"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences, e.g. before comparing labels."""
    return _ANSI_PATTERN.sub("", text)
