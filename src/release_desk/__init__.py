"""Top-level package for release-desk.

Author: 2025 release-desk contributors
License: GPL-3.0
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("release-desk")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "0.0.0"
