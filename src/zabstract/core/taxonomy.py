# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.06
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/taxonomy.py

"""
Registry of abstraction types.

Each AbstractionType has exactly one entry holding its live quota per
(filesystem, job) and exactly one extractor. Adding a type means adding an
enum member and one registry entry; _check_registry() refuses to import the
module otherwise.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from zabstract.core.abstraction import AbstractionType
from zabstract.core.extractors import (
    BookmarkExtractor,
    HoldExtractor,
    last_received_hold_extractor,
    replication_cursor_v1_extractor,
    replication_cursor_v2_extractor,
    step_bookmark_extractor,
    step_hold_extractor,
)
from zabstract.system.exceptions import ImplementationError, ValidationError

# Quota value meaning "every instance is live"
UNLIMITED = -1


@dataclass(frozen=True)
class AbstractionTypeInfo:
    live_quota: int
    bookmark_extractor: Optional[BookmarkExtractor] = None
    hold_extractor: Optional[HoldExtractor] = None


_REGISTRY: dict[AbstractionType, AbstractionTypeInfo] = {
    AbstractionType.STEP_BOOKMARK: AbstractionTypeInfo(
        live_quota=2, bookmark_extractor=step_bookmark_extractor),
    AbstractionType.STEP_HOLD: AbstractionTypeInfo(
        live_quota=2, hold_extractor=step_hold_extractor),
    AbstractionType.LAST_RECEIVED_HOLD: AbstractionTypeInfo(
        live_quota=1, hold_extractor=last_received_hold_extractor),
    AbstractionType.REPLICATION_CURSOR_BOOKMARK_V1: AbstractionTypeInfo(
        live_quota=UNLIMITED, bookmark_extractor=replication_cursor_v1_extractor),
    AbstractionType.REPLICATION_CURSOR_BOOKMARK_V2: AbstractionTypeInfo(
        live_quota=1, bookmark_extractor=replication_cursor_v2_extractor),
}

ALL_ABSTRACTION_TYPES: frozenset[AbstractionType] = frozenset(AbstractionType)


def _check_extractors(t: AbstractionType, info: AbstractionTypeInfo) -> None:
    has_bookmark = info.bookmark_extractor is not None
    has_hold = info.hold_extractor is not None
    if has_bookmark == has_hold:
        raise ImplementationError(f"extractors misconfigured for {t}")


def _check_registry() -> None:
    missing = ALL_ABSTRACTION_TYPES - _REGISTRY.keys()
    if missing:
        raise ImplementationError(f"abstraction types missing from registry: {sorted(missing)}")
    for t, info in _REGISTRY.items():
        _check_extractors(t, info)
        if info.live_quota != UNLIMITED and info.live_quota < 1:
            raise ImplementationError(f"invalid live quota {info.live_quota} for {t}")


_check_registry()


def _info(t: AbstractionType) -> AbstractionTypeInfo:
    try:
        return _REGISTRY[t]
    except (KeyError, TypeError):
        raise ImplementationError(f"unregistered abstraction type {t!r}") from None


def validate_abstraction_type(value: Union[str, AbstractionType]) -> AbstractionType:
    """Convert untrusted input into an AbstractionType.

    Raises:
        ValidationError: For unknown type strings
    """
    try:
        return AbstractionType(value)
    except ValueError:
        raise ValidationError(f"unknown abstraction type {value!r}") from None


def num_live_per_fs_and_job(t: AbstractionType) -> int:
    """Number of instances of `t` that are live per (filesystem, job); UNLIMITED (-1) for all."""
    return _info(t).live_quota


def bookmark_extractor(t: AbstractionType) -> Optional[BookmarkExtractor]:
    """The bookmark extractor, or None if `t` is hold-based."""
    return _info(t).bookmark_extractor


def hold_extractor(t: AbstractionType) -> Optional[HoldExtractor]:
    """The hold extractor, or None if `t` is bookmark-based."""
    return _info(t).hold_extractor


def extractors(t: AbstractionType) -> tuple[Optional[BookmarkExtractor], Optional[HoldExtractor]]:
    """Both extractor slots of `t`; exactly one is set."""
    info = _info(t)
    _check_extractors(t, info)
    return info.bookmark_extractor, info.hold_extractor


def abstraction_type_set_from_strings(values: Iterable[str]) -> frozenset[AbstractionType]:
    types = set()
    for i, value in enumerate(values, start=1):
        try:
            types.add(validate_abstraction_type(value))
        except ValidationError as e:
            raise ValidationError(f"invalid abstraction type #{i} {value!r}: {e}") from e
    return frozenset(types)


def validate_abstraction_type_set(types: Iterable) -> None:
    for t in types:
        if not isinstance(t, AbstractionType):
            validate_abstraction_type(t)


def format_abstraction_type_set(types: Iterable[AbstractionType]) -> str:
    return ",".join(sorted(str(t) for t in types))
