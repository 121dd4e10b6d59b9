"""Collection repositories: one authoritative list per storage slot."""

from wedding_planner.repository.collection import (
    CollectionNotLoadedError,
    CollectionRepository,
    CollectionState,
    LoadResult,
    QuarantinedRecord,
    RepositoryError,
    SaveResult,
    expense_repository,
    people_repository,
)

__all__ = [
    "CollectionNotLoadedError",
    "CollectionRepository",
    "CollectionState",
    "LoadResult",
    "QuarantinedRecord",
    "RepositoryError",
    "SaveResult",
    "expense_repository",
    "people_repository",
]
