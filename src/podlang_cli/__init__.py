"""podlang CLI - kubectl plugin guessing the language a pod's app was written in."""

from podlang import __version__

__all__ = ["__version__"]
