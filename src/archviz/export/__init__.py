"""Diagram text exporters (PlantUML and Graphviz DOT).

Exporters read only the visible part of a GraphModel and never its computed
positions, so export output is independent of the layout that was run.
"""

import logging

from ..config import ExportConfig
from ..errors import UnknownFormatError
from ..graph.model import GraphModel
from .base import DiagramExporter
from .graphviz import GraphvizExporter
from .identifiers import IdentifierRegistry, sanitize_identifier
from .plantuml import PlantUMLExporter

logger = logging.getLogger(__name__)

EXPORTERS: dict[str, type[DiagramExporter]] = {
    "plantuml": PlantUMLExporter,
    "graphviz": GraphvizExporter,
}


def get_exporter(format_name: str, config: ExportConfig | None = None) -> DiagramExporter:
    """Instantiate the exporter registered for ``format_name``.

    Raises:
        UnknownFormatError: If no exporter is registered under that name
    """
    format_name = str(getattr(format_name, "value", format_name))
    if format_name not in EXPORTERS:
        available = list(EXPORTERS.keys())
        raise UnknownFormatError(f"Unknown format '{format_name}'. Available: {available}")
    return EXPORTERS[format_name](config)


def export_to_plantuml(graph: GraphModel | None, config: ExportConfig | None = None) -> str:
    return PlantUMLExporter(config).render(graph)


def export_to_graphviz(graph: GraphModel | None, config: ExportConfig | None = None) -> str:
    return GraphvizExporter(config).render(graph)


__all__ = [
    "DiagramExporter",
    "PlantUMLExporter",
    "GraphvizExporter",
    "IdentifierRegistry",
    "sanitize_identifier",
    "get_exporter",
    "export_to_plantuml",
    "export_to_graphviz",
]
