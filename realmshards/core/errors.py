"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class RealmShardsError(Exception):
    pass

class DataLoadError(RealmShardsError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(RealmShardsError):
    pass

class CatalogIntegrityError(ValidationError):
    def __init__(self, problems: list[str]):
        super().__init__(f"Catalog integrity check failed ({len(problems)} problem(s)): " + "; ".join(problems[:5]))
        self.problems = problems

class NotFoundError(RealmShardsError, KeyError):
    def __str__(self) -> str:
        # KeyError repr-quotes its message; keep it readable
        return str(self.args[0]) if self.args else self.__class__.__name__

class SpeciesNotFound(NotFoundError):
    pass

class MoveNotFound(NotFoundError):
    pass
