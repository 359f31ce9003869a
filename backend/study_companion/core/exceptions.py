from __future__ import annotations


class TagEntryNotFoundError(KeyError):
    """Raised by administrative registry operations on an unknown canonical key."""

    def __init__(self, module_id: str, canonical_key: str) -> None:
        super().__init__(f"Tag entry {canonical_key!r} not found in module {module_id!r}")
        self.module_id = module_id
        self.canonical_key = canonical_key

    def __str__(self) -> str:
        return str(self.args[0])
