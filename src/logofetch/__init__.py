"""Resolve company names to domains and download validated logos."""

from .workflows import *  # noqa: F401,F403
from .workflows import __all__ as _workflow_exports

__version__ = "1.0.0"

__all__ = list(_workflow_exports) + ["__version__"]
