"""
Logging and Console Output.

CLI messages are ordinary `logging` records on the ``testable_transformers``
logger, rendered by a single `rich` handler. The handler writes to whichever
console is active: tests and embedding applications swap it with
`set_console` (e.g. a recording console) and restore stdout with
`reset_console`.

Attributes:
    console (_ConsoleProxy): Stable handle to the active Rich Console.
    logger (logging.Logger): The package logger.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "testable_transformers"

# Between INFO and WARNING
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

STYLES = Theme(
  {
    "logging.level.success": "bold green",
    "path": "bold blue",
    "marker": "magenta",
  }
)

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)


def _fresh_console() -> Console:
  return Console(theme=STYLES)


class _ConsoleProxy:
  """
  Delegates to the active `Console`; modules keep importing this one object.

  Owns the package's `RichHandler` and rebinds it whenever the console changes.
  """

  def __init__(self) -> None:
    self._target: Console = _fresh_console()
    self._handler: Optional[RichHandler] = None
    self._bind(self._target)

  @property
  def backend(self) -> Console:
    return self._target

  def _bind(self, target: Console) -> None:
    if self._handler is not None:
      logger.removeHandler(self._handler)

    self._target = target
    self._handler = RichHandler(
      console=target,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    logger.addHandler(self._handler)

  def swap(self, target: Console) -> None:
    self._bind(target)

  def restore(self) -> None:
    self._bind(_fresh_console())

  def print(self, *objects: Any, **kwargs: Any) -> None:
    self._target.print(*objects, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._target, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Sends console output and package log records to `new_console`.

  Args:
      new_console (Console): e.g. ``Console(record=True)`` to capture output.
  """
  console.swap(new_console)


def reset_console() -> None:
  """Sends output back to a new standard output console."""
  console.restore()


def get_console() -> Console:
  return console.backend


def log_info(msg: str) -> None:
  """
  Logs progress of a command.

  Args:
      msg (str): Message text, rich markup allowed (e.g. ``[path]x.py[/path]``).
  """
  logger.info(f"ℹ️  {msg}")


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}")


def log_warning(msg: str) -> None:
  logger.warning(f"⚠️  {msg}")


def log_error(msg: str) -> None:
  logger.error(f"❌ {msg}")
