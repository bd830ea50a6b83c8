"""
Data persistence layer.

Provides abstract repository pattern and the JSON file implementation
for storing extracted voters.
"""

from .json_store import VoterStore
from .repository import VoterRepository, PagedResult

__all__ = [
    "VoterStore",
    "VoterRepository",
    "PagedResult",
]
