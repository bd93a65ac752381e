"""Stores that hold loaded sidebar indexes."""

from .index_store import IndexStore

__all__ = ["IndexStore"]
