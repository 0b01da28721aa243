# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Main entrypoint when running the companion with
`python -m companion_agent`.
"""

import logging
import asyncio
import argparse

from pathlib import Path

from .agent import run_chat, show_plan
from .src.config import settings

logging.captureWarnings(True)
logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the store and config.json (defaults to DATA_DIR)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to an app config JSON file (defaults to <data-dir>/config.json)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Interactive session with the main agent
    subparsers.add_parser("chat")

    # Initialize the main agent and print the session plan
    subparsers.add_parser("plan")

    return parser


async def main():
    parser = setup_parser()
    args = parser.parse_args()

    overrides = {}
    if args.data_dir:
        overrides["DATA_DIR"] = Path(args.data_dir).expanduser()
    if args.config:
        overrides["CONFIG_FILE"] = Path(args.config).expanduser()
    app_settings = settings.model_copy(update=overrides)

    if args.command == "chat":
        await run_chat(app_settings)
    elif args.command == "plan":
        await show_plan(app_settings)


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
