"""Shared pytest fixtures and helpers."""

from .auth import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .products import *  # noqa: F401,F403
