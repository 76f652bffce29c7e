"""
Shared pytest fixtures for ctxlog tests.

This module provides:
- Singleton reset around every test
- A facility writing to an in-memory buffer
- A parser for emitted text lines
"""

import io
import json
import re
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Ensure ctxlog package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ctxlog.core.facility import Facility, get_facility, reset_facility
from ctxlog.core.settings import LoggingSettings

_LINE = re.compile(r'^(DEBUG|INFO|WARN|ERROR): "(.*?)" (\{.*\})$')

ParsedLine = tuple[str, str, dict[str, Any]]


def parse_text_lines(output: str) -> list[ParsedLine]:
    """Split text-format output into (level, message, context) tuples."""
    parsed = []
    for line in output.splitlines():
        match = _LINE.match(line)
        assert match, f"unexpected line format: {line!r}"
        level, message, context = match.groups()
        parsed.append((level, message, json.loads(context)))
    return parsed


@pytest.fixture(autouse=True)
def _clean_facility():
    """Drop the singleton before and after every test."""
    reset_facility()
    yield
    reset_facility()


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def facility(buffer: io.StringIO) -> Facility:
    """A standalone facility writing text lines to ``buffer``."""
    return Facility(LoggingSettings(), output=buffer)


@pytest.fixture
def singleton(buffer: io.StringIO) -> Facility:
    """The process-wide facility, re-targeted at ``buffer``."""
    log = get_facility()
    log.configure(output=buffer)
    return log


@pytest.fixture
def lines(buffer: io.StringIO) -> Callable[[], list[ParsedLine]]:
    """Return a callable parsing everything written to ``buffer`` so far."""
    return lambda: parse_text_lines(buffer.getvalue())
