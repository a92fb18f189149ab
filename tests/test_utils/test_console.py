"""
Tests for the Logging and Console Utilities.

Verifies:
1. The proxy forwards to a real Rich console.
2. `set_console` redirects package logging.
3. The semantic wrappers add their prefixes and levels.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from testable_transformers.utils.console import (
  LOGGER_NAME,
  SUCCESS_LEVEL_NUM,
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


def test_console_proxy():
  assert callable(console.print)
  assert hasattr(console, "export_text")
  assert isinstance(get_console(), Console)


def test_set_console_captures_logs():
  capture = Console(record=True, width=200)
  set_console(capture)

  log_info("Expanded identity")
  log_error("File not found")

  output = capture.export_text()
  assert "ℹ️" in output
  assert "Expanded identity" in output
  assert "❌" in output
  assert "File not found" in output


def test_markup_is_rendered():
  capture = Console(record=True, width=200)
  set_console(capture)

  log_success("Wrote [path]out.py[/path]")

  output = capture.export_text()
  assert "✅ Wrote out.py" in output
  assert "[path]" not in output


def test_reset_creates_fresh_console():
  temp = Console()
  set_console(temp)
  assert get_console() is temp

  reset_console()
  assert get_console() is not temp


def test_single_rich_handler_after_swaps():
  set_console(Console(record=True))
  set_console(Console(record=True))

  handlers = [h for h in logging.getLogger(LOGGER_NAME).handlers if isinstance(h, RichHandler)]
  assert len(handlers) == 1


def test_levels(caplog):
  with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
    log_success("done")
    log_warning("careful")

  levels = [record.levelno for record in caplog.records]
  assert levels == [SUCCESS_LEVEL_NUM, logging.WARNING]
  assert logging.getLevelName(SUCCESS_LEVEL_NUM) == "SUCCESS"


def test_default_console_writes_stdout(capsys):
  reset_console()
  log_info("InfoText")
  assert "InfoText" in capsys.readouterr().out
