# src/planit/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState and the view shell, then starts one
front end:
- the Textual widget (default),
- or the console REPL (PLANIT_UI=console).
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..core.shell import ViewShell
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    # Console logging would draw over the Textual screen; file only in that mode.
    log_file = setup_logging(
        log_dir=settings.log_dir,
        console=settings.ui == "console",
        console_level=console_level,
    )

    logger.info("Starting %s (ui=%s, log=%s)...", settings.app_name, settings.ui, log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    shell = ViewShell(state)

    try:
        if settings.ui == "console":
            from ..connectors.console_connector import run_console_loop

            run_console_loop(shell)
        else:
            from ..ui.app import PlanItApp

            PlanItApp(shell).run()
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
