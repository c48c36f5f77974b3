"""ImageMagick 7 installer for Debian/Ubuntu.

Builds aom, libheif and ImageMagick from source, in that order:
- Fail-fast ordered steps
- Idempotent dependency installation
- Terminal shows status lines only; everything else goes to the log file
"""

__version__ = "4.0.0"

__all__ = ["__version__"]
