from __future__ import annotations

from rich.console import Console

# Console for command output (stdout). Logging has its own console.
RENDER = Console(soft_wrap=True, highlight=False)
