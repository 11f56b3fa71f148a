"""Interactive access code prompt.

The session manager awaits a CodePrompt whenever it needs a new code. A
prompt returns the entered code, or None when the user cancels.
"""

import asyncio
from typing import Protocol

PROMPT_TEXT = "Enter your 6-digit access code: "


class CodePrompt(Protocol):
    """Asks the user for an access code."""

    async def __call__(self) -> str | None: ...


class ConsolePrompt:
    """Reads the code from standard input on a worker thread.

    An empty line, EOF or Ctrl-C counts as cancellation.
    """

    def __init__(self, text: str = PROMPT_TEXT) -> None:
        self._text = text

    async def __call__(self) -> str | None:
        try:
            entered = await asyncio.to_thread(input, self._text)
        except (EOFError, KeyboardInterrupt):
            return None
        return entered.strip() or None
