import asyncio
import logging
import re
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Tuple

import discord
from discord.ext import commands

from config.config import Config
from db.redis_client import RedisClient
from games.challenge import ChallengeResult, format_challenge, run_challenge
from games.countdown import CountdownPuzzles
from games.expression_parser import ExpressionParser
from games.solver import CountdownSolver
from utils.helpers import send_chunked_message

logger = logging.getLogger(__name__)

MAX_NUMBERS = 6
PUZZLE_SIZE = 5


def parse_challenge_args(text: Optional[str]) -> Tuple[int, List[int]]:
    """
    Parse `<target> <n1> <n2> ...` into (target, numbers).

    Raises:
        ValueError: If the text is missing parts or holds non-integers
    """
    parts = (text or '').replace(',', ' ').split()
    if len(parts) < 2:
        raise ValueError("Usage: <target> <number> [number ...]")
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise ValueError("Target and numbers must be whole numbers")
    if len(values) - 1 > MAX_NUMBERS:
        raise ValueError(f"At most {MAX_NUMBERS} numbers are allowed")
    return values[0], values[1:]


def mention_request(content: str, bot_user_id: int, prefix: str = '!') -> Optional[str]:
    """
    Text of a mention addressed to the bot, or None for prefixed commands.

    Commands are already run by process_commands, so a message that starts
    with the prefix is not answered a second time as a mention.
    """
    if content.lstrip().startswith(prefix):
        return None
    return re.sub(rf'<@!?{bot_user_id}>', '', content).strip()


class SolverBusyError(RuntimeError):
    """A solve was requested while an earlier one is still running."""


class SolveRunner:
    """
    Runs one solve at a time on a dedicated worker thread.

    A timed-out search cannot be cancelled, so it keeps the worker until it
    finishes and further solves are refused instead of queued behind it.
    """

    def __init__(self, timeout: float, solver: Optional[CountdownSolver] = None):
        self.timeout = timeout
        self.solver = solver or CountdownSolver()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='solver')
        self._pending: Optional[Future] = None

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def run(self, numbers: List[int], target: int) -> Optional[ChallengeResult]:
        """
        Solve within the time limit.

        Returns None when the limit is hit.

        Raises:
            SolverBusyError: If an earlier search is still running
        """
        if self.busy:
            raise SolverBusyError("Still working on an earlier puzzle, try again shortly.")

        self._pending = self._executor.submit(run_challenge, numbers, target, self.solver)
        try:
            return await asyncio.wait_for(asyncio.wrap_future(self._pending), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Solve timed out after %ss: target=%d numbers=%s",
                           self.timeout, target, numbers)
            return None

    def shutdown(self):
        self._executor.shutdown(wait=False)


class NumbersBot(commands.Bot):
    def __init__(self, config: Config):
        intents = discord.Intents.default()
        intents.message_content = True  # Needed to read message content
        intents.guilds = True
        intents.guild_messages = True

        super().__init__(command_prefix="!", intents=intents)
        print("Initializing NumbersBot...", flush=True)
        self.config = config
        self.redis_client = RedisClient(config.redis_host, config.redis_port)
        self.owner_id = int(config.owner_id)
        self.runner = SolveRunner(config.solve_timeout)
        self.parser = ExpressionParser()
        self.puzzles = CountdownPuzzles()

        # Message deduplication buffer
        self.processed_messages = deque(maxlen=100)

        # Command handlers dictionary
        self.command_handlers = {
            'solve': self._handle_solve,
            'check': self._handle_check,
            'puzzle': self._handle_puzzle,
            'preset': self._handle_preset,
            'presets': self._handle_list_presets,
            'history': self._handle_history,
            'clearhistory': self._handle_clear_history,
            'addchan': self._handle_add_channel,
            'mute': self._handle_mute_channel,
            'shutdown': self._handle_shutdown,
        }
        print("NumbersBot initialization complete.", flush=True)

    async def setup_hook(self):
        """This is called when the bot is ready to start"""
        self.add_commands()

    async def on_ready(self):
        print(f"Logged in as {self.user} (ID: {self.user.id})", flush=True)
        print("------", flush=True)

        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.watching,
                name="for numbers | !solve"
            )
        )

    async def has_permissions(self, ctx) -> bool:
        """Check if user has required permissions (admin, moderator, or bot owner)"""
        return (
            ctx.author.id == self.owner_id or
            (ctx.guild and (
                ctx.author.guild_permissions.administrator or
                ctx.author.guild_permissions.moderate_members
            ))
        )

    def add_commands(self):
        """Register commands using the command handlers dictionary"""
        for cmd_name, handler in self.command_handlers.items():
            # Create a closure that properly captures the handler
            def make_callback(h):
                async def callback(ctx, *, arg=None):
                    if arg is None:
                        await h(ctx)
                    else:
                        await h(ctx, arg)
                return callback

            cmd = commands.Command(make_callback(handler), name=cmd_name)
            self.add_command(cmd)

        logger.info("Registered %d commands", len(self.commands))

    async def _send_solution(self, ctx, numbers: List[int], target: int):
        try:
            async with ctx.typing():
                result = await self.runner.run(numbers, target)
        except SolverBusyError as e:
            await ctx.send(str(e))
            return

        if result is None:
            await ctx.send(f"Gave up after {self.config.solve_timeout:g} seconds.")
            return

        if ctx.guild:
            self.redis_client.add_to_history(str(ctx.guild.id), str(ctx.channel.id), result)
        await ctx.send(f"```\n{format_challenge(result)}\n```")

    async def _handle_solve(self, ctx, args=None):
        """Handle the solve command
        Usage: !solve <target> <number> [number ...]
        """
        try:
            target, numbers = parse_challenge_args(args)
        except ValueError as e:
            await ctx.send(str(e))
            return

        await self._send_solution(ctx, numbers, target)

    async def _handle_check(self, ctx, args=None):
        """Handle the check command - verify an answer
        Usage: !check <target> <number> [number ...] | <expression>
        """
        if not args or '|' not in args:
            await ctx.send("Usage: !check <target> <number> [number ...] | <expression>")
            return

        challenge_text, expression = args.split('|', 1)
        try:
            target, numbers = parse_challenge_args(challenge_text)
        except ValueError as e:
            await ctx.send(str(e))
            return

        result = self.parser.check(expression, numbers, target)
        if not result['valid']:
            await ctx.send(f"Invalid answer: {result['error']}")
        elif result['exact']:
            await ctx.send(f"Correct! {expression.strip()} = {target}")
        else:
            distance = abs(target - result['result'])
            await ctx.send(f"{expression.strip()} = {result['result']}, {distance} away from {target}.")

    async def _handle_puzzle(self, ctx, args=None):
        """Handle the puzzle command - random Countdown numbers
        Usage: !puzzle [large]
        """
        try:
            num_large = int(args) if args else CountdownPuzzles.NUM_LARGE
            puzzle = self.puzzles.new_puzzle(num_large=num_large, num_small=max(PUZZLE_SIZE - num_large, 0))
        except ValueError as e:
            await ctx.send(f"Invalid puzzle request: {e}")
            return

        await self._send_solution(ctx, puzzle.numbers, puzzle.target)

    async def _handle_preset(self, ctx, name=None):
        """Handle the preset command
        Usage: !preset [name]
        """
        try:
            puzzle = self.config.get_puzzle(name.strip() if name else 'default')
        except ValueError as e:
            await ctx.send(str(e))
            return

        await self._send_solution(ctx, puzzle.numbers, puzzle.target)

    async def _handle_list_presets(self, ctx, args=None):
        if not self.config.puzzles:
            await ctx.send("No preset puzzles are configured.")
            return

        presets_info = "\n".join([
            f"**{name}**: {puzzle.target} from {' '.join(map(str, puzzle.numbers))}"
            + (f" - {puzzle.description}" if puzzle.description else "")
            for name, puzzle in self.config.puzzles.items()
        ])
        await send_chunked_message(ctx.channel, f"Available presets:\n{presets_info}")

    async def _handle_history(self, ctx, args=None):
        if not ctx.guild:
            await ctx.send("History is only kept in servers.")
            return

        history = self.redis_client.get_history(str(ctx.guild.id), str(ctx.channel.id))
        if not history:
            await ctx.send("Nothing solved here yet.")
            return

        lines = []
        for result in history:
            numbers = ' '.join(map(str, result.numbers))
            outcome = result.expression if result.solved else "no solution"
            lines.append(f"- {result.target} from {numbers}: {outcome} ({result.elapsed_us} us)")
        await send_chunked_message(ctx.channel, "Recent solves:\n" + "\n".join(lines))

    async def _handle_clear_history(self, ctx, args=None):
        if not ctx.guild:
            await ctx.send("History is only kept in servers.")
            return

        if not await self.has_permissions(ctx):
            await ctx.send("You need administrator permissions or need to be the bot owner to use this command.")
            return

        self.redis_client.clear_history(str(ctx.guild.id), str(ctx.channel.id))
        await ctx.send("Solve history cleared for this channel.")

    async def _handle_add_channel(self, ctx, args=None):
        """Handle the addchan command - answer mentions in this channel"""
        if not ctx.guild:
            await ctx.send("This command only works in servers.")
            return

        if not await self.has_permissions(ctx):
            await ctx.send("You need administrator permissions or need to be the bot owner to use this command.")
            return

        channel_id = str(ctx.channel.id)
        self.redis_client.add_allowed_channel(str(ctx.guild.id), channel_id)
        await ctx.send(f"Numbers bot will now answer mentions in <#{channel_id}>.")

    async def _handle_mute_channel(self, ctx, args=None):
        """Handle the mute command - stop answering mentions in this channel"""
        if not ctx.guild:
            await ctx.send("This command only works in servers.")
            return

        if not await self.has_permissions(ctx):
            await ctx.send("You need administrator permissions or need to be the bot owner to use this command.")
            return

        channel_id = str(ctx.channel.id)
        self.redis_client.remove_allowed_channel(str(ctx.guild.id), channel_id)
        await ctx.send(f"Numbers bot will no longer answer mentions in <#{channel_id}>.")

    async def _handle_shutdown(self, ctx, args=None):
        """Handle the shutdown command"""
        if ctx.author.id != self.owner_id:
            await ctx.send("Only the bot owner can use this command.")
            return

        await ctx.send("Shutting down...")
        self.runner.shutdown()
        await self.close()

    async def on_message(self, message: discord.Message):
        """Called when a message is received"""
        # Ignore messages from the bot itself
        if message.author == self.user:
            return

        # Deduplication check - must be BEFORE process_commands to prevent double command execution
        if message.id in self.processed_messages:
            return
        self.processed_messages.append(message.id)

        await self.process_commands(message)

        # Mentions are answered only in allowed channels
        if self.user not in message.mentions or not message.guild:
            return
        content = mention_request(message.content, self.user.id, self.command_prefix)
        if content is None:
            return
        if not self.redis_client.is_channel_allowed(str(message.guild.id), str(message.channel.id)):
            return

        try:
            target, numbers = parse_challenge_args(content)
        except ValueError as e:
            await message.channel.send(str(e), reference=message)
            return

        try:
            result = await self.runner.run(numbers, target)
        except SolverBusyError as e:
            await message.channel.send(str(e), reference=message)
            return
        if result is None:
            await message.channel.send(f"Gave up after {self.config.solve_timeout:g} seconds.", reference=message)
            return

        self.redis_client.add_to_history(str(message.guild.id), str(message.channel.id), result)
        await send_chunked_message(message.channel, f"```\n{format_challenge(result)}\n```", reference=message)
