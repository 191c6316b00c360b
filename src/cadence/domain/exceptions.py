"""Error kinds raised by the scheduling engine and its storage collaborators."""


class CadenceError(Exception):
    """Base class for every error raised by cadence."""


class InvalidGrade(CadenceError, ValueError):
    """A grade outside of again / hard / good / easy."""

    def __init__(self, grade: object):
        self.grade = grade
        super().__init__(f"Invalid grade {grade!r}; expected one of again, hard, good, easy")


class InvalidConfig(CadenceError, ValueError):
    """A learning configuration that cannot drive the scheduler."""


class StorageError(CadenceError):
    """Opaque persistence failure surfaced by a repository."""


class ItemNotFound(StorageError, KeyError):
    """No item with the requested id exists in the store."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")

    def __str__(self) -> str:
        return f"Item not found: {self.item_id}"
