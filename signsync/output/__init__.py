# SignSync Output Module
# Rich console output

from signsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
