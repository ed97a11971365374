"""General purpose utility functions."""
from pathlib import Path
import sys
from typing import NoReturn

def error(msg: str, *args: object) -> NoReturn:
    if args:
        msg = msg%args
    print(msg, file=sys.stderr)
    sys.exit(1)

def parse_path(value: str, opt: str) -> Path:
    """
    Parse a str path to an absolute L{Path} object.
    The path does not need to exist.

    Watch out, prints a message and SystemExits on error!
    """
    try:
        return Path(Path.cwd(), value).resolve()
    except Exception as ex:
        error(f"{opt}: invalid path, {ex}.")
