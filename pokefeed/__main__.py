from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from pokefeed.config import Config, load_config
from pokefeed.console.render import render_feed
from pokefeed.logging_setup import setup_logging
from pokefeed.jobs.pipeline import (
    build_app_context,
    close_app_context,
    open_session,
    persist_session,
    run_commands,
    write_status,
)


logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pokefeed")
    parser.add_argument(
        "--env",
        default=".env",
        help="Path to .env file (default: .env).",
    )
    parser.add_argument("--session", default=None, help="Session id (default: SESSION_ID env).")
    parser.add_argument("--pages", type=int, default=0, help="Load this many more pages.")
    parser.add_argument("--refresh", action="store_true", help="Reload the page the session points at.")
    parser.add_argument("--retry", action="store_true", help="Retry the page the session points at.")
    parser.add_argument("--reset", action="store_true", help="Forget the saved session first.")
    return parser.parse_args()


async def _run(config: Config, args: argparse.Namespace) -> int:
    session_id = args.session or config.session_id
    ctx = await build_app_context(config)
    try:
        controller = await open_session(ctx, session_id, reset=args.reset)
        controller.refresh_failed.subscribe(lambda: print("refresh failed, showing the previous feed"))

        await run_commands(controller, pages=args.pages, refresh=args.refresh, retry=args.retry)
        logger.info(
            "session=%s next_page=%s unresolved_error=%s",
            session_id,
            controller.session.next_page_to_load,
            controller.session.has_unresolved_error,
        )

        print(render_feed(controller.feed.value))
        await persist_session(ctx, session_id, controller)
        write_status(ctx, controller)

        state = controller.feed.value
        return 1 if state is not None and state.is_failure else 0
    finally:
        await close_app_context(ctx)


def main() -> None:
    args = _parse_args()
    env_path = Path(args.env)
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    config = load_config()
    setup_logging(config.log_level, config.log_file)

    raise SystemExit(asyncio.run(_run(config, args)))


if __name__ == "__main__":
    main()
