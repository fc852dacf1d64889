"""Admin product manager state types."""

from src.models.admin import AdminState, DraftRecord, MutationState, PaginationState, PendingFile

__all__ = [
    "AdminState",
    "DraftRecord",
    "MutationState",
    "PaginationState",
    "PendingFile",
]
