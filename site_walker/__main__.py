import argparse
import asyncio
import logging
import sys

from .browser import BrowserSession
from .config import BrowserConfig, WalkConfig, start_url_from_env
from .walker import RandomWalker

logger = logging.getLogger("site_walker")


def build_parser(walk_defaults: WalkConfig, browser_defaults: BrowserConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Randomly walk a web site through its catalog actions")
    parser.add_argument("--url", default=start_url_from_env(), help="Start URL of the walk")
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=browser_defaults.headless,
        help="Run the browser without a window (--no-headless overrides HEADLESS)",
    )
    parser.add_argument("--max-steps", type=int, default=walk_defaults.max_steps, help="Maximum number of actions to execute")
    parser.add_argument("--min-wait", type=int, default=walk_defaults.min_wait_ms, help="Minimum pause (ms) before each action")
    parser.add_argument("--max-wait", type=int, default=walk_defaults.max_wait_ms, help="Maximum pause (ms) before each action")
    parser.add_argument(
        "--sequential",
        action="store_true",
        default=not walk_defaults.random_order,
        help="Try actions in catalog order instead of at random",
    )
    parser.add_argument(
        "--max-visited",
        type=int,
        default=walk_defaults.max_visited_locations,
        help="Maximum number of distinct locations to visit",
    )
    parser.add_argument("--out", default=walk_defaults.output_dir, help="Directory for the walk trace")
    parser.add_argument("--screenshots", default=walk_defaults.screenshot_dir, help="Directory for error screenshots")
    parser.add_argument("--animate", action="store_true", help="Highlight each element before clicking it")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


async def run(args: argparse.Namespace, browser_config: BrowserConfig) -> int:
    config = WalkConfig(
        max_steps=args.max_steps,
        min_wait_ms=args.min_wait,
        max_wait_ms=args.max_wait,
        random_order=not args.sequential,
        max_visited_locations=args.max_visited,
        screenshot_dir=args.screenshots,
        output_dir=args.out,
        animate=args.animate,
    )
    browser_config.headless = args.headless

    async with BrowserSession(browser_config) as session:
        walker = RandomWalker(session, config)
        summary = await walker.walk(args.url)

    logger.info("Visited locations: %d", len(summary.visited_locations))
    logger.info("Steps executed: %d (failed: %d)", summary.steps, summary.failures)
    return 0


def main() -> None:
    try:
        walk_defaults = WalkConfig.from_env()
        browser_defaults = BrowserConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)
    args = build_parser(walk_defaults, browser_defaults).parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )

    # If animations are enabled, headless mode makes them pointless
    if args.animate and args.headless:
        logger.warning("--animate requires a visible browser. Disabling headless mode.")
        args.headless = False

    try:
        sys.exit(asyncio.run(run(args, browser_defaults)))
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)
    except Exception:
        logger.exception("Walk failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
