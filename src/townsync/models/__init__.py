"""Data models for town records."""

from townsync.models.town import Language, TownInfo, TownRecord, is_link

__all__ = [
    "Language",
    "TownInfo",
    "TownRecord",
    "is_link",
]
