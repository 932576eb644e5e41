"""Intent records: reading intent files and reducing them per artifact."""

from __future__ import annotations

from tidemark_core.intents.reader import IntentReader, split_front_matter
from tidemark_core.intents.store import IntentStore

__all__ = ["IntentReader", "IntentStore", "split_front_matter"]
