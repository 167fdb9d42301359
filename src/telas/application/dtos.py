"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from telas.domain import PieceSpec
from telas.infrastructure.bin_packing import PackingResult, calculate_metrics


@dataclass
class PieceInput:
    """Input DTO for one raw piece entry.

    Values are kept raw (numbers, numeric strings or None) and only
    converted by domain validation.
    """

    width: Any
    length: Any
    count: Any = 1


@dataclass(frozen=True)
class PackingOutput:
    """Output DTO: the piece list and its packing, as the caller renders it.

    Attributes:
        pieces: Piece list the result was computed from.
        packing_result: Sheets, placements and metrics.
        errors: Validation messages when the input was rejected.
    """

    pieces: tuple[PieceSpec, ...]
    packing_result: PackingResult
    errors: list[str] = field(default_factory=list)

    @classmethod
    def rejected(cls, errors: list[str]) -> PackingOutput:
        """Output for input that failed validation: nothing packed."""
        empty = PackingResult(layouts=(), metrics=calculate_metrics((), ()))
        return cls(pieces=(), packing_result=empty, errors=errors)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_complete(self) -> bool:
        return self.packing_result.is_complete

    @property
    def required_bins(self) -> int:
        return self.packing_result.metrics.required_bins

    @property
    def total_area(self) -> float:
        return self.packing_result.metrics.total_area

    @property
    def utilization(self) -> float:
        return self.packing_result.metrics.utilization
