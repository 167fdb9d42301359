"""Validation structures and cutting advisory checks for job files.

Schema validation is handled by Pydantic when the file is loaded. This
module re-submits every entry to a piece list and adds
advisory warnings about wasteful or redundant piece lists.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from telas.application.config.loader import ConfigError
from telas.application.config.schema import JobConfiguration
from telas.domain import ValidationError as PieceValidationError
from telas.domain import PieceList, PieceSpec, format_dimension
from telas.infrastructure.bin_packing import PackingResult, pack_pieces

# Below this projected utilization a job gets a waste advisory
LOW_UTILIZATION_THRESHOLD = 0.5


@dataclass
class ValidationError:
    """A blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "pieces[0].width")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    @classmethod
    def from_config_error(cls, error: ConfigError) -> "ValidationResult":
        """Report a job file that could not be loaded as validation errors.

        Schema failures keep their JSON paths and offending values; JSON
        syntax errors are addressed by line and column.
        """
        result = cls()
        if error.error_type == "validation":
            for detail in error.details:
                result.add_error(detail["path"], detail["message"], detail.get("value"))
        elif error.error_type == "json_parse":
            for detail in error.details:
                result.add_error(
                    f"Line {detail['line']}, Column {detail['column']}",
                    f"Invalid JSON syntax: {detail['message']}",
                )
        elif error.error_type == "file_not_found":
            result.add_error(str(error.path), "File not found")
        else:
            result.add_error(str(error.path or "job file"), error.message)
        return result


def check_piece_entries(config: JobConfiguration) -> ValidationResult:
    """Submit every configured entry to a fresh piece list, as a pack run does.

    This applies the domain piece validation and the piece list limits.
    """
    result = ValidationResult()
    piece_list = PieceList()
    for i, piece in enumerate(config.pieces):
        try:
            piece_list.submit(piece.width, piece.length, piece.count)
        except PieceValidationError as e:
            result.add_error(
                path=f"pieces[{i}].{e.field}",
                message=e.message,
                value=getattr(piece, e.field, None),
            )
    return result


def check_cutting_advisories(
    config: JobConfiguration, packing: PackingResult | None = None
) -> ValidationResult:
    """Check a job against cutting practice.

    Advisories checked:
    - The piece list is empty
    - The same dimensions appear in more than one entry
    - Projected sheet utilization is below 50%

    Args:
        config: A validated JobConfiguration instance
        packing: Packing of the configured pieces, computed if omitted

    Returns:
        ValidationResult containing any warnings found
    """
    result = ValidationResult()

    if not config.pieces:
        result.add_warning(
            path="pieces",
            message="No pieces defined; no sheets will be required",
            suggestion="Add at least one piece with width, length and count",
        )
        return result

    seen: dict[tuple[float, float], list[int]] = defaultdict(list)
    for i, piece in enumerate(config.pieces):
        seen[(piece.width, piece.length)].append(i)
    for (width, length), indices in seen.items():
        if len(indices) > 1:
            paths = ", ".join(f"pieces[{i}]" for i in indices)
            result.add_warning(
                path=f"pieces[{indices[1]}]",
                message=(
                    f"{format_dimension(width)}x{format_dimension(length)} "
                    f"is listed more than once ({paths})"
                ),
                suggestion="Combine the entries into one with a larger count",
            )

    if packing is None:
        packing = pack_pieces(_specs_from_config(config))
    utilization = packing.metrics.utilization
    if packing.is_complete and utilization < LOW_UTILIZATION_THRESHOLD:
        result.add_warning(
            path="pieces",
            message=(
                f"Projected utilization is {utilization * 100:.1f}% across "
                f"{packing.metrics.required_bins} sheet(s)"
            ),
            suggestion="Most of the stock will be waste; consider adding pieces to fill it",
        )

    return result


def validate_config(config: JobConfiguration) -> ValidationResult:
    """Perform full validation of a job configuration.

    Args:
        config: A JobConfiguration instance (already validated by Pydantic)

    Returns:
        ValidationResult containing any errors or warnings
    """
    result = check_piece_entries(config)
    if not result.is_valid:
        return result

    packing = pack_pieces(_specs_from_config(config))
    if packing.failure is not None:
        result.add_error(path="pieces", message=f"Packing failed: {packing.failure}")
        return result

    return result.merge(check_cutting_advisories(config, packing))


def _specs_from_config(config: JobConfiguration) -> tuple[PieceSpec, ...]:
    return tuple(
        PieceSpec(id=i, width=piece.width, length=piece.length, count=piece.count)
        for i, piece in enumerate(config.pieces, start=1)
    )
