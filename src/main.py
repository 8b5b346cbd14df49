import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from config.config import Config
from games.challenge import format_challenge, run_challenge

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reach a target number from a set of numbers using + - * /"
    )
    parser.add_argument('target', nargs='?', type=int, help="number to reach")
    parser.add_argument('numbers', nargs='*', type=int, help="numbers to use, each exactly once")
    parser.add_argument('--preset', help="solve a named puzzle from the puzzle file")
    parser.add_argument('--bot', action='store_true', help="run the Discord bot")
    parser.add_argument('-v', '--verbose', action='store_true', help="debug logging")
    return parser


async def run_bot(config: Config):
    # Bot dependencies load only in bot mode
    import discord
    from bot import NumbersBot

    print(f"Discord.py Version: {discord.__version__}", flush=True)
    config.require_bot_settings()
    bot = NumbersBot(config)
    print("Starting bot...", flush=True)
    await bot.start(config.discord_token)


def main(argv=None) -> int:
    # Load environment variables
    load_dotenv()

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        config = Config()

        if args.bot:
            asyncio.run(run_bot(config))
            return 0

        if args.target is not None:
            if not args.numbers:
                print("At least one number is required", file=sys.stderr)
                return 2
            numbers, target = args.numbers, args.target
        else:
            puzzle = config.get_puzzle(args.preset or 'default')
            numbers, target = puzzle.numbers, puzzle.target

        result = run_challenge(numbers, target)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    print(format_challenge(result))
    return 0 if result.solved else 1


if __name__ == "__main__":
    sys.exit(main())
