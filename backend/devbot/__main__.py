"""Console front-end for the DevBot chat engine.

Run with::

    python -m devbot

Lines are sent as user turns; lines starting with ``/`` are commands
(``/help`` lists them).
"""

from __future__ import annotations

import asyncio
import logging
import sys

from devbot.agent.backend import GeminiBackend
from devbot.config import settings
from devbot.engine import ChatEngine
from devbot.memory.session_store import build_session_store
from devbot.models.messages import Message, Role
from devbot.models.sessions import ChatMode, Variant

logger = logging.getLogger(__name__)

HELP = """Commands:
  /new              start a new chat
  /list             list saved chats
  /open <id>        reopen a saved chat
  /delete <id>      delete a saved chat
  /mode <standard|search|thinking>
  /bot <devbot|noire>
  /attach <path>    attach a file to the next message
  /quit             exit"""


class ConsoleChat:
    """Line-oriented chat loop around a ``ChatEngine``."""

    def __init__(self, engine: ChatEngine) -> None:
        self.engine = engine
        self._pending_files: list[str] = []
        self._printed = 0

    def _render(self, message: Message) -> None:
        # The engine hands over the full text each time; print the new tail.
        sys.stdout.write(message.content[self._printed :])
        sys.stdout.flush()
        self._printed = len(message.content)

    def _show_conversation(self) -> None:
        print(f"== {self.engine.title} [{self.engine.variant.value}/{self.engine.mode.value}]")
        for message in self.engine.messages:
            speaker = "you" if message.role == Role.USER else self.engine.variant.value
            print(f"{speaker}> {message.content}")

    async def _command(self, line: str) -> bool:
        name, _, arg = line[1:].partition(" ")
        arg = arg.strip()

        if name == "quit":
            return False
        if name == "new":
            self.engine.new_session()
            self._show_conversation()
        elif name == "list":
            for session in self.engine.list_sessions():
                print(f"{session.id}  {session.title}  ({len(session.messages)} messages)")
        elif name == "open":
            if await self.engine.switch_session(arg):
                self._show_conversation()
            else:
                print(f"No chat with id {arg}")
        elif name == "delete":
            self.engine.delete_session(arg)
        elif name == "mode":
            try:
                self.engine.set_mode(ChatMode(arg))
            except ValueError:
                print(f"Unknown mode: {arg}")
            print(f"mode: {self.engine.mode.value}")
        elif name == "bot":
            try:
                self.engine.set_variant(Variant(arg))
            except ValueError:
                print(f"Unknown assistant: {arg}")
            print(f"assistant: {self.engine.variant.value} (mode: {self.engine.mode.value})")
        elif name == "attach":
            self._pending_files.append(arg)
        else:
            print(HELP)
        return True

    async def run(self) -> None:
        self._show_conversation()
        while True:
            try:
                line = (await asyncio.to_thread(input, "you> ")).strip()
            except EOFError:
                break

            if line.startswith("/"):
                if not await self._command(line):
                    break
                continue
            if not line and not self._pending_files:
                continue

            files, self._pending_files = self._pending_files, []
            self._printed = 0
            sys.stdout.write(f"{self.engine.variant.value}> ")
            try:
                await self.engine.send_message(line, files=files, on_update=self._render)
            except OSError as exc:
                print(f"Cannot attach file: {exc}")
                continue
            print()

        await self.engine.wait_background()


async def main() -> None:
    """Run the console chat."""
    store = build_session_store(settings)
    try:
        engine = ChatEngine(
            GeminiBackend(settings.google_api_key, temperature=settings.temperature),
            store,
        )
        await ConsoleChat(engine).run()
    finally:
        store.close()


def run() -> None:
    """Console script entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
