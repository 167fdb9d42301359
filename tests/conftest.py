"""Pytest configuration and shared fixtures for sheet packer tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from telas.application import PackingOutput
from telas.domain import PieceSpec
from telas.infrastructure.bin_packing import ShelfBinPacker

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "jobs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def three_pieces() -> tuple[PieceSpec, ...]:
    """Three 1m x 2m units: 6 m2, one sheet."""
    return (PieceSpec(id=1, width=1.0, length=2.0, count=3),)


@pytest.fixture
def full_sheets() -> tuple[PieceSpec, ...]:
    """Two pieces the size of a whole sheet."""
    return (PieceSpec(id=1, width=2.45, length=6.0, count=2),)


@pytest.fixture
def oversized_piece() -> tuple[PieceSpec, ...]:
    """A piece wider than the sheet, built without input validation."""
    return (PieceSpec(id=1, width=3.0, length=1.0, count=1),)


@pytest.fixture
def three_pieces_output(three_pieces: tuple[PieceSpec, ...]) -> PackingOutput:
    return PackingOutput(
        pieces=three_pieces, packing_result=ShelfBinPacker().pack(three_pieces)
    )


@pytest.fixture
def failed_output(oversized_piece: tuple[PieceSpec, ...]) -> PackingOutput:
    return PackingOutput(
        pieces=oversized_piece, packing_result=ShelfBinPacker().pack(oversized_piece)
    )
