from __future__ import annotations


class ScoringError(ValueError):
    """A drawing could not be reduced to a deviation score."""


class InsufficientData(ScoringError):
    def __init__(self, count: int, minimum: int = 3):
        self.count = count
        self.minimum = minimum
        super().__init__(f"need at least {minimum} points to score a shape, got {count}")


class DegenerateShape(ScoringError):
    def __init__(self, detail: str = "all points coincide after centering"):
        super().__init__(f"degenerate shape: {detail}")


class SessionError(LookupError):
    """A session operation referenced trials inconsistently."""


class NotFound(SessionError):
    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class DuplicateTrial(SessionError):
    def __init__(self, key: str, field: str = "id"):
        self.key = key
        self.field = field
        super().__init__(f"a trial with {field} '{key}' already exists in this session")
