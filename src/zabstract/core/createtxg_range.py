# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.05
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/createtxg_range.py

"""
Interval arithmetic over createtxg values.

A CreateTXGRange has independently optional, independently inclusive or
exclusive bounds. Exclusive bounds are normalized to inclusive ones
(since b -> b+1, until b -> b-1) before any comparison.
"""

from dataclasses import dataclass
from typing import Optional

from zabstract.config.manager import createtxg_zero_allowed
from zabstract.system.exceptions import ImplementationError, ValidationError

MAX_CREATETXG = 2**64 - 1


@dataclass(frozen=True)
class CreateTXGRangeBound:
    createtxg: int
    inclusive: Optional[bool]  # must be set

    def validate(self) -> None:
        if self.inclusive is None:
            raise ValidationError("Inclusive: must be set")
        if not 0 <= self.createtxg <= MAX_CREATETXG:
            raise ValidationError(f"CreateTXG {self.createtxg} out of range [0, {MAX_CREATETXG}]")
        if self.createtxg == 0 and not createtxg_zero_allowed():
            raise ValidationError("CreateTXG must be non-zero")


@dataclass(frozen=True)
class _EffectiveBounds:
    since_inclusive: int
    since_unbounded: bool
    until_inclusive: int
    until_unbounded: bool


@dataclass(frozen=True)
class CreateTXGRange:
    """A non-empty range of createtxg values; no bounds means any value matches."""
    since: Optional[CreateTXGRangeBound] = None
    until: Optional[CreateTXGRangeBound] = None

    def validate(self) -> None:
        if self.since is not None:
            try:
                self.since.validate()
            except ValidationError as e:
                raise ValidationError(f"Since: {e}") from e
        if self.until is not None:
            try:
                self.until.validate()
            except ValidationError as e:
                raise ValidationError(f"Until: {e}") from e
        try:
            self._effective_bounds()
        except ValidationError as e:
            raise ValidationError(f"specified range {self} is semantically invalid: {e}") from e

    def _effective_bounds(self) -> _EffectiveBounds:
        # callers must have validated since and until
        since_inclusive = 0
        until_inclusive = 0

        if self.since is not None:
            since_inclusive = self.since.createtxg
            if not self.since.inclusive:
                if self.since.createtxg == MAX_CREATETXG:
                    raise ValidationError(
                        f"Since-exclusive ({self.since.createtxg}) must be less than {MAX_CREATETXG}"
                    )
                since_inclusive += 1

        if self.until is not None:
            until_inclusive = self.until.createtxg
            if not self.until.inclusive:
                if self.until.createtxg == 0:
                    raise ValidationError(f"Until-exclusive ({self.until.createtxg}) must be greater than 0")
                until_inclusive -= 1

        if self.since is not None and self.until is not None and since_inclusive > until_inclusive:
            raise ValidationError(
                f"effective range bounds are [{since_inclusive},{until_inclusive}] which is empty"
            )

        return _EffectiveBounds(
            since_inclusive=since_inclusive,
            since_unbounded=self.since is None,
            until_inclusive=until_inclusive,
            until_unbounded=self.until is None,
        )

    def _checked_bounds(self) -> _EffectiveBounds:
        try:
            self.validate()
        except ValidationError as e:
            raise ImplementationError(f"CreateTXGRange used without validation: {e}") from e
        return self._effective_bounds()

    def is_unbounded(self) -> bool:
        """True iff neither side is constrained. The range must be valid."""
        bounds = self._checked_bounds()
        return bounds.since_unbounded and bounds.until_unbounded

    def contains(self, createtxg: int) -> bool:
        """Membership test against the effective inclusive bounds. The range must be valid."""
        bounds = self._checked_bounds()
        since_matches = bounds.since_unbounded or bounds.since_inclusive <= createtxg
        until_matches = bounds.until_unbounded or createtxg <= bounds.until_inclusive
        return since_matches and until_matches

    def __str__(self) -> str:
        if self.since is None:
            since = "~"
        else:
            opening = "?" if self.since.inclusive is None else ("[" if self.since.inclusive else "(")
            since = f"{opening}{self.since.createtxg}"
        if self.until is None:
            until = "~"
        else:
            closing = "?" if self.until.inclusive is None else ("]" if self.until.inclusive else ")")
            until = f"{self.until.createtxg}{closing}"
        return f"{since},{until}"
