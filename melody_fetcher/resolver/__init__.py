"""
Resolver Layer.

Everything that talks to the external media-get binary: locating it,
building its argument vectors and running it as a subprocess.
"""

from .media_get import MediaGetResolver, find_binary
from .process import CommandResult, ProcessRunner

__all__ = ["CommandResult", "MediaGetResolver", "ProcessRunner", "find_binary"]
