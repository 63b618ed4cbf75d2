"""appshelf — install and keep curated desktop apps up to date via winget."""

__version__ = "0.1.0"
