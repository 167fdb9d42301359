"""Exporter protocol, format registry and multi-format export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from telas.application.dtos import PackingOutput


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Writes a packing output in one file format.

    Every registered format can also be rendered to a string, which the REST
    API returns as a download.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    def export(self, output: PackingOutput, path: Path) -> None: ...

    def export_string(self, output: PackingOutput) -> str: ...


class ExporterRegistry:
    """Format name to exporter class, filled by ``@ExporterRegistry.register``."""

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> Callable[[type[Exporter]], type[Exporter]]:
        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            previous = cls._exporters.get(format_name)
            if previous is not None and previous is not exporter_class:
                logger.warning(
                    "Format '%s' re-registered: %s replaces %s",
                    format_name,
                    exporter_class.__name__,
                    previous.__name__,
                )
            cls._exporters[format_name] = exporter_class
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Exporter class for a format.

        Raises:
            KeyError: If the format is unknown; the message lists the
                available formats.
        """
        try:
            return cls._exporters[format_name]
        except KeyError:
            available = ", ".join(cls.available_formats()) or "none"
            raise KeyError(
                f"Unknown export format '{format_name}'. Available formats: {available}"
            ) from None

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters)

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters


class ExportManager:
    """Writes one packing output in several formats into a directory.

    Files are named ``{project_name}_{format}.{ext}``.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export_all(
        self,
        formats: list[str],
        output: PackingOutput,
        project_name: str = "telas",
    ) -> dict[str, Path]:
        """Export ``output`` once per format.

        All formats are resolved before anything is written, so an unknown
        format leaves the directory untouched.

        Returns:
            Written file path per format name.

        Raises:
            KeyError: If a format is not registered.
        """
        exporters = {name: ExporterRegistry.get(name)() for name in formats}
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written: dict[str, Path] = {}
        for name, exporter in exporters.items():
            path = self.output_dir / f"{project_name}_{name}.{exporter.file_extension}"
            exporter.export(output, path)
            logger.info("Wrote %s export to %s", name, path)
            written[name] = path
        return written
