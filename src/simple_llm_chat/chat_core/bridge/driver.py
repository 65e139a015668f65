"""Drives a chat CLI child process from a front-end."""

from __future__ import annotations

import asyncio
import codecs
import sys
from typing import Callable, List, Optional, Sequence

from ..exceptions import BridgeError
from ..logger import get_logger
from .framing import FrameEvent, PromptFramer
from .protocol import build_image_command, encode_input

logger = get_logger(__name__)

READ_SIZE = 256
DEFAULT_COMMAND = (sys.executable, "-m", "simple_llm_chat")
NO_BANNERS_FLAG = "--no-banners"


class ChatProcess:
    """
    Runs the chat CLI as a child process and exchanges the line protocol with it.

    Output is read in small chunks as it is produced, decoded incrementally so
    multi-byte characters split across reads survive, and passed through a
    PromptFramer. ``on_output`` receives transcript text, ``on_turn_complete``
    fires whenever the child re-prompts and ``on_error`` receives failures to
    start or write to the child.
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        on_output: Optional[Callable[[str], None]] = None,
        on_turn_complete: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        read_size: int = READ_SIZE,
    ) -> None:
        """
        Initializes the driver. Nothing is started until :meth:`start`.

        Args:
            command: Program and arguments of the child; ``--no-banners`` is appended.
                Defaults to running this package with the current interpreter.
            on_output: Receives each piece of transcript text.
            on_turn_complete: Called when the child is ready for the next input.
            on_error: Receives human readable error messages.
            read_size: Number of bytes requested per read.
        """
        self.command: List[str] = list(command or DEFAULT_COMMAND)
        self.on_output = on_output
        self.on_turn_complete = on_turn_complete
        self.on_error = on_error
        self.read_size = read_size

        self._process: Optional[asyncio.subprocess.Process] = None
        self._reader: Optional[asyncio.Task[None]] = None
        self._framer = PromptFramer()
        self._turns: asyncio.Queue[bool] = asyncio.Queue()

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def start(self) -> bool:
        """
        Starts the child process.

        Returns:
            True if the process was started, False otherwise (``on_error`` is notified).
        """
        args = self.command if NO_BANNERS_FLAG in self.command else [*self.command, NO_BANNERS_FLAG]
        self._framer.reset()
        self._turns = asyncio.Queue()
        try:
            self._process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            self._report_error(f"Failed to start process: {exc}")
            return False

        logger.info("Started chat process %s (pid %s).", args[0], self._process.pid)
        self._reader = asyncio.create_task(self._read_output())
        return True

    async def send(self, text: str) -> bool:
        """
        Sends one user message; embedded newlines are encoded.

        Returns:
            False if the process is not running or the write failed.
        """
        if not self.is_running or self._process is None or self._process.stdin is None:
            return False
        try:
            self._process.stdin.write((encode_input(text) + "\n").encode("utf-8"))
            await self._process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            self._report_error(f"Error sending input: {exc}")
            return False
        return True

    async def send_with_image(self, image_path: str, prompt: str) -> bool:
        """Sends ``prompt`` with the image at ``image_path`` attached."""
        try:
            command = build_image_command(image_path, prompt)
        except BridgeError as exc:
            self._report_error(str(exc))
            return False
        return await self.send(command)

    async def wait_for_turn(self, timeout: Optional[float] = None) -> bool:
        """
        Waits for the next re-prompt that has not been waited for yet.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            True when the child completed a turn, False if its output ended first.

        Raises:
            asyncio.TimeoutError: If ``timeout`` elapses.
        """
        return await asyncio.wait_for(self._turns.get(), timeout)

    async def close(self) -> None:
        """Stops the child process, killing it if it does not exit on its own."""
        process, self._process = self._process, None
        if process is not None and process.returncode is None:
            if process.stdin is not None:
                process.stdin.close()
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            logger.info("Chat process %s stopped.", process.pid)

        reader, self._reader = self._reader, None
        if reader is not None:
            try:
                await reader
            except asyncio.CancelledError:
                pass

    async def restart(self) -> bool:
        """Stops the current child, discarding its conversation, and starts a new one."""
        await self.close()
        return await self.start()

    async def __aenter__(self) -> "ChatProcess":
        if not await self.start():
            raise BridgeError(f"Could not start chat process: {' '.join(self.command)}")
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _read_output(self) -> None:
        process = self._process
        if process is None or process.stdout is None:
            self._turns.put_nowait(False)
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while True:
                chunk = await process.stdout.read(self.read_size)
                if not chunk:
                    break
                self._dispatch(self._framer.feed(decoder.decode(chunk)))

            self._dispatch(self._framer.feed(decoder.decode(b"", final=True)))
            self._dispatch(self._framer.flush())
        finally:
            # Waiters must always learn that the output ended.
            self._turns.put_nowait(False)
            logger.debug("Chat process output closed.")

    def _dispatch(self, events: List[FrameEvent]) -> None:
        for event in events:
            try:
                if event.turn_complete:
                    self._turns.put_nowait(True)
                    if self.on_turn_complete is not None:
                        self.on_turn_complete()
                elif self.on_output is not None:
                    self.on_output(event.text)
            except Exception:
                logger.exception("Chat process output handler failed.")

    def _report_error(self, message: str) -> None:
        logger.error(message)
        if self.on_error is not None:
            self.on_error(message)
