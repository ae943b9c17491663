"""read-next: related-content suggestions backed by a content-addressed summary cache."""

from readnext.version import __version__

__all__ = ["__version__"]
