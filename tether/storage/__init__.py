"""
Storage Module - Caller-side persistence for decks.
"""

from tether.storage.deck_store import DeckStore, ItemRepository

__all__ = ["DeckStore", "ItemRepository"]
