"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini: the script location is the migrations
folder beside this module and the URL comes from src.db.config.Settings.

Usage examples:
    python -m src.db.run_migrations upgrade head
    python -m src.db.run_migrations downgrade base
    python -m src.db.run_migrations current
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

from src.db.config import get_settings

logger = logging.getLogger(__name__)

_DEFAULT_ARGS: Dict[str, List[str]] = {
    "upgrade": ["head"],
    "downgrade": ["-1"],
}

_COMMANDS: Dict[str, Callable[..., object]] = {
    "upgrade": command.upgrade,
    "downgrade": command.downgrade,
    "history": command.history,
    "current": command.current,
    "heads": command.heads,
    "stamp": command.stamp,
    "show": command.show,
}


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Return an Alembic Config pointing at this package's migrations."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parent / "migrations"))
    # Used for offline mode; env.py builds its own async engine online.
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run one Alembic command, e.g. main(["upgrade", "head"])."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cmd, other = args[0], args[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)
    if cmd in ("show", "stamp") and not other:
        print(f"Usage: {cmd} <revision>")
        sys.exit(2)

    logger.info("alembic %s %s", cmd, " ".join(other))
    handler(build_config(), *(other or _DEFAULT_ARGS.get(cmd, [])))


if __name__ == "__main__":
    main()
