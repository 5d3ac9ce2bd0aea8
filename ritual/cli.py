import logging
import sys
from pathlib import Path

import fncli

from . import config, db
from .core.errors import RitualError

_VERBOSE_FLAGS = {"-v", "--verbose"}


def _configure_logging(verbose: bool) -> None:
    levels = logging.getLevelNamesMapping()
    level = logging.DEBUG if verbose else levels.get(config.get_log_level(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main():
    user_args = sys.argv[1:]
    verbose = any(a in _VERBOSE_FLAGS for a in user_args)
    user_args = [a for a in user_args if a not in _VERBOSE_FLAGS]
    _configure_logging(verbose)

    db.init()
    fncli.autodiscover(Path(__file__).parent, "ritual")

    if not user_args:
        from .dash import dashboard

        dashboard()
        return
    argv = ["ritual", *user_args]
    try:
        code = fncli.dispatch(argv)
    except RitualError as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
