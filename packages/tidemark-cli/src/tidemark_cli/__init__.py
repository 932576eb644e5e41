"""tidemark-cli: command line for coordinated Maven version bumps."""

from __future__ import annotations

__version__ = "0.1.0"
