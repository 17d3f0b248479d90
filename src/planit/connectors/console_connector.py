# src/planit/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_task_list
from ..core.shell import View, ViewShell

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _print_onboarding(shell: ViewShell) -> None:
    t = shell.t
    lines = [
        t("onboarding.welcome"),
        t("onboarding.intro"),
        f"  1. {t('onboarding.steps.step1')}",
        f"  2. {t('onboarding.steps.step2')}",
        f"  3. {t('onboarding.steps.step3')}",
        "",
        "  /set token <token>, /set objective_db_id <id>, /set tasks_db_id <id>",
        "  /databases lists the databases your token can see.",
    ]
    print("\n".join(lines))


def run_console_loop(shell: ViewShell) -> None:
    logger.info("Console connector started.")

    try:
        asyncio.run(shell.startup())
    except Exception:
        logger.exception("Startup failed.")

    _print_ts("[CONSOLE] PlanIt. Use /help for commands. Use /exit to quit.\n")

    if shell.onboarding_visible:
        _print_onboarding(shell)
        shell.dismiss_onboarding()

    if shell.view == View.SETTINGS:
        _print_ts(shell.t("app.not_configured"))
    else:
        print(render_task_list(shell))

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = command_registry.handle(shell, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is None:
            cmd_response = "Commands start with /. Use /help to list available commands."

        print(f"[{_ts_local()}] {cmd_response}")

    logger.info("Console connector finished.")
