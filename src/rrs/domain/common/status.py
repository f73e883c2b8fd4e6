from __future__ import annotations

from enum import Enum
from typing import TypeVar

from rrs.domain.common.errors import InvalidStatusError

StatusT = TypeVar("StatusT", bound=Enum)


def parse_status(enum_cls: type[StatusT], raw: str | None) -> StatusT:
    if raw is None:
        raise InvalidStatusError(f"missing {enum_cls.__name__} value")
    normalized = raw.strip().upper()
    try:
        return enum_cls(normalized)
    except ValueError as exc:
        raise InvalidStatusError(f"unknown {enum_cls.__name__} value: {raw!r}") from exc
