import asyncio
import sys

from simple_llm_chat import ChatProcess


async def main() -> None:
    """
    Minimal front-end: runs the chat CLI as a child process and relays a terminal session to it.

    Lines starting with ``img <path> | <prompt>`` are sent with an image attached.
    """
    process = ChatProcess(
        on_output=lambda text: print(text, end="", flush=True),
        on_error=lambda message: print(f"[error] {message}", file=sys.stderr),
    )

    async with process:
        if not await process.wait_for_turn():
            return

        while True:
            user_input = await asyncio.to_thread(input, "\n> ")
            if user_input.strip().lower() in ["exit", "quit"]:
                print("Goodbye!")
                break

            if user_input.startswith("img ") and "|" in user_input:
                path, prompt = user_input[4:].split("|", 1)
                sent = await process.send_with_image(path.strip(), prompt.strip())
            else:
                sent = await process.send(user_input)

            if not sent or not await process.wait_for_turn():
                print("The chat process has stopped.")
                break


if __name__ == "__main__":
    asyncio.run(main())
