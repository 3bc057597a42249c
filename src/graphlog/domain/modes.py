"""Cycle query selection as a tagged union, validated once at the boundary."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from graphlog.domain.errors import InvalidConstraint


class _Mode(BaseModel):
    model_config = {"frozen": True}

    @property
    def accepts_constraints(self) -> bool:
        return True


class ShortestMode(_Mode):
    kind: Literal["shortest"] = "shortest"


class LongestMode(_Mode):
    kind: Literal["longest"] = "longest"


class AllMode(_Mode):
    kind: Literal["all"] = "all"


class CountMode(_Mode):
    kind: Literal["count"] = "count"


class HeadMode(_Mode):
    kind: Literal["head"] = "head"


class TakeMode(_Mode):
    kind: Literal["take"] = "take"
    n: int = Field(ge=1)


class GirthMode(_Mode):
    kind: Literal["girth"] = "girth"

    @property
    def accepts_constraints(self) -> bool:
        return False


class HamiltonianMode(_Mode):
    kind: Literal["hamiltonian"] = "hamiltonian"

    @property
    def accepts_constraints(self) -> bool:
        return False


CycleMode = Annotated[
    ShortestMode
    | LongestMode
    | AllMode
    | CountMode
    | HeadMode
    | TakeMode
    | GirthMode
    | HamiltonianMode,
    Field(discriminator="kind"),
]

MODE_NAMES: tuple[str, ...] = (
    "shortest",
    "longest",
    "all",
    "count",
    "head",
    "take",
    "girth",
    "hamiltonian",
)

_adapter: TypeAdapter[CycleMode] = TypeAdapter(CycleMode)


def parse_mode(value: str | dict[str, Any]) -> CycleMode:
    """Validate a mode name or ``{"kind": ..., ...}`` mapping.

    Raises:
        InvalidConstraint: for an unknown kind or a bad ``take`` count.
    """
    data = {"kind": value} if isinstance(value, str) else value
    try:
        return _adapter.validate_python(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"])
        msg = f"Invalid cycle mode {data!r}: {first['msg']}"
        raise InvalidConstraint(msg, field=loc) from exc
