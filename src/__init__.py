"""figmadump — cache-aware Figma team/project/file/document downloader."""

from figmadump.version import __version__

__all__ = ["__version__"]
