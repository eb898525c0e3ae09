"""moar public API surface.

Only the CLI entry points and version are considered stable; the remaining
modules are internal and may change.
"""

from .cli import main, run
from .version import __version__

__all__ = ["main", "run", "__version__"]
