from __future__ import annotations

from dataclasses import dataclass

from flask_jwt_extended import get_jwt_identity


@dataclass(frozen=True)
class PrincipalId:
    """
    Identifier of an authenticated principal (the JWT ``sub`` claim).

    Two principals are the same only when their subjects are equal strings,
    compared exactly (no case folding, no trimming). Empty subjects are
    rejected so a missing identity can never match an owner.
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError("principal id must be a string")
        if not self.value:
            raise ValueError("principal id must not be empty")

    @classmethod
    def of(cls, raw) -> "PrincipalId":
        if isinstance(raw, PrincipalId):
            return raw
        if raw is None:
            raise ValueError("principal id must not be empty")
        return cls(str(raw))

    def __str__(self) -> str:
        return self.value


def current_principal_id() -> PrincipalId:
    # only valid inside a @jwt_required() view
    return PrincipalId.of(get_jwt_identity())
