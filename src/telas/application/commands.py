"""Application commands (use cases) for sheet calculation."""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from telas.domain import PieceList, PieceSpec, ValidationError
from telas.infrastructure.bin_packing import PackingResult, pack_pieces

from .dtos import PackingOutput, PieceInput

logger = logging.getLogger(__name__)

Packer = Callable[[tuple[PieceSpec, ...]], PackingResult]


class SheetPackerSession:
    """A piece list together with its always-current packing.

    Every change to the list (submit or remove) is followed by a full
    recompute, so ``output`` always reflects the current pieces. The packer
    is memoized on the list contents, so recomputing an unchanged list is
    free and returns the same result.
    """

    def __init__(
        self,
        piece_list: PieceList | None = None,
        packer: Packer = pack_pieces,
    ) -> None:
        self.piece_list = piece_list if piece_list is not None else PieceList()
        self.packer = packer
        self._output = self.recompute()

    @property
    def pieces(self) -> tuple[PieceSpec, ...]:
        return self.piece_list.snapshot()

    @property
    def output(self) -> PackingOutput:
        """Packing output for the current piece list."""
        return self._output

    def submit_piece(self, width: Any, length: Any, count: Any = 1) -> PieceSpec:
        """Validate and append a piece, then recompute.

        Raises:
            ValidationError: If the entry is rejected. Nothing changes.
        """
        piece = self.piece_list.submit(width, length, count)
        logger.debug("Added piece #%d (%s x%d)", piece.id, piece.label, piece.count)
        self._output = self.recompute()
        return piece

    def remove_piece(self, piece_id: int) -> bool:
        """Remove a piece by id, then recompute.

        Returns:
            False if no piece had that id (nothing changes).
        """
        removed = self.piece_list.remove(piece_id)
        if removed:
            logger.debug("Removed piece #%d", piece_id)
            self._output = self.recompute()
        return removed

    def recompute(self) -> PackingOutput:
        """Pack the current piece list from scratch."""
        snapshot = self.piece_list.snapshot()
        return PackingOutput(pieces=snapshot, packing_result=self.packer(snapshot))


class PackPiecesCommand:
    """Command to validate a batch of raw entries and pack them in one go."""

    def __init__(self, packer: Packer = pack_pieces) -> None:
        self.packer = packer

    def execute(self, inputs: Sequence[PieceInput]) -> PackingOutput:
        """Execute the command.

        Every entry is validated; if any is rejected, nothing is packed and
        the output carries one message per rejected entry.

        Args:
            inputs: Raw piece entries in submission order.

        Returns:
            PackingOutput with the packing, or with errors.
        """
        piece_list = PieceList()
        errors: list[str] = []

        for number, entry in enumerate(inputs, start=1):
            try:
                piece_list.submit(entry.width, entry.length, entry.count)
            except ValidationError as e:
                errors.append(f"Piece {number}: {e}")

        if errors:
            return PackingOutput.rejected(errors)

        snapshot = piece_list.snapshot()
        result = self.packer(snapshot)

        logger.info(
            "Packed %d pieces onto %d sheets",
            piece_list.total_count,
            result.required_bins,
        )
        return PackingOutput(pieces=snapshot, packing_result=result)
