"""Command line entry point: interactive chat loop and single-shot mode."""

from __future__ import annotations

import argparse
import asyncio
import io
import logging
import sys
from typing import Optional, Sequence, TextIO

from .chat_core.bridge import CLEAR_COMMAND, EXIT_COMMAND, decode_input, parse_image_command
from .chat_core.config import ChatConfig, load_config, load_environment
from .chat_core.conversation import ChatConsole, CompletionTransport, ConversationEngine, TerminalConsole
from .chat_core.exceptions import ImageLoadError
from .chat_core.images import load_image_base64
from .chat_core.logger import get_logger, setup_logging
from .chat_core.tools import ApprovalCallback, build_default_registry
from .chat_impl import OpenAIStreamTransport

logger = get_logger(__name__)

INSTRUCTIONS = (
    "=== SimpleLLMChat CLI ===\n"
    "Type 'exit' to quit.\n"
    "Type 'clear' to reset the chat.\n"
    "Type 'image <filepath>' to send an image.\n"
)
USER_PROMPT = "You: "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simple-llm-chat",
        description="Chat with an OpenAI-compatible model that can call local tools.",
    )
    parser.add_argument("prompt", nargs="*", help="Prompt to send; runs a single turn and exits")
    parser.add_argument("--no-banners", action="store_true", help="Do not print instructions in interactive mode")
    parser.add_argument(
        "-o", "--output-only", action="store_true", help="Print only the model's reply (single-turn mode)"
    )
    parser.add_argument("--image", metavar="PATH", help="Attach an image to the prompt (single-turn mode)")
    parser.add_argument("--config", metavar="PATH", help="Settings file (default: LLMSettings.ini)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    return parser


def is_non_interactive(args: argparse.Namespace) -> bool:
    """Any prompt text, image or ``-o`` selects single-turn mode."""
    return bool(args.prompt) or args.image is not None or args.output_only


async def read_line(stream: TextIO) -> Optional[str]:
    """Reads one line without blocking the event loop; None at end of input."""
    line = await asyncio.to_thread(stream.readline)
    if not line:
        return None
    return line.rstrip("\r\n")


def make_approval_callback(stdin: TextIO, stdout: TextIO) -> ApprovalCallback:
    """Asks on the terminal before an approval-gated tool runs. End of input refuses."""

    async def approve(name: str, arguments: str) -> bool:
        stdout.write(f"\n[approval] allow tool '{name}' with arguments: {arguments}? (y/n) ")
        stdout.flush()
        answer = await read_line(stdin)
        return answer is not None and answer.strip().lower() in ("y", "yes")

    return approve


def build_engine(
    config: ChatConfig,
    transport: CompletionTransport,
    console: ChatConsole,
    approval_callback: Optional[ApprovalCallback] = None,
) -> ConversationEngine:
    return ConversationEngine(
        config=config,
        transport=transport,
        registry=build_default_registry(config),
        approval_callback=approval_callback,
        console=console,
    )


async def run_interactive(
    engine: ConversationEngine,
    show_banners: bool,
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
) -> None:
    """
    Runs the line protocol until ``exit`` or end of input.

    Args:
        engine: The conversation to drive.
        show_banners: Print the instructions at start and after ``clear``.
        stdin: Source of user lines.
        stdout: Transcript output; ``You: `` is written before every read.
        stderr: Receives input errors.
    """
    if show_banners:
        stdout.write(INSTRUCTIONS)

    while True:
        stdout.write(USER_PROMPT)
        stdout.flush()
        line = await read_line(stdin)
        if line is None:
            logger.debug("End of input; leaving the chat loop.")
            break

        user_input = decode_input(line)
        if user_input == EXIT_COMMAND:
            break

        if user_input == CLEAR_COMMAND:
            engine.clear()
            if show_banners:
                stdout.write("Context cleared.\n\n" + INSTRUCTIONS)
            continue

        text, image = user_input, None
        command = parse_image_command(user_input)
        if command is not None:
            if not command.ok:
                stderr.write(f"Error: {command.error}\n")
                stderr.flush()
                continue
            try:
                image = load_image_base64(command.path)
            except ImageLoadError as exc:
                stderr.write(f"Error processing image: {exc}\n")
                stderr.flush()
                continue
            text = command.prompt

        await engine.submit(text, image)
        stdout.write("\n")


async def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    config = load_config(args.config)
    if not config.llm_server:
        logger.warning("No llmserver configured; requests will fail.")

    image: Optional[str] = None
    if args.image is not None:
        try:
            image = load_image_base64(args.image)
        except ImageLoadError as exc:
            stderr.write(f"Error processing image: {exc}\n")
            return 1

    single_turn = is_non_interactive(args)
    console = TerminalConsole(
        assistant_name=config.assistant_name,
        output_only=args.output_only,
        show_tool_output=config.show_tool_output,
        stream=stdout,
        error_stream=stderr,
    )
    transport = OpenAIStreamTransport.from_config(config)
    engine = build_engine(config, transport, console, make_approval_callback(stdin, stdout))

    try:
        if single_turn:
            await engine.submit(" ".join(args.prompt), image)
        else:
            await run_interactive(engine, not args.no_banners, stdin, stdout, stderr)
    finally:
        await transport.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    load_environment()
    # Front-ends exchange UTF-8 regardless of the locale.
    for stream in (sys.stdin, sys.stdout):
        if isinstance(stream, io.TextIOWrapper):
            stream.reconfigure(encoding="utf-8")
    try:
        return asyncio.run(run(args, sys.stdin, sys.stdout, sys.stderr))
    except KeyboardInterrupt:
        return 130
