"""Shared pytest fixtures and helpers."""

from .core import *  # noqa: F401,F403
from .factories import *  # noqa: F401,F403
