"""PlantUML diagram exporter."""

import logging

from ..graph.model import GraphModel
from ..graph.models import Node
from .base import EMPTY_STATE_TEXT, DiagramExporter, ExportContext, is_collapsed_container
from .styles import edge_style, node_style

logger = logging.getLogger(__name__)

INDENT = "  "


class PlantUMLExporter(DiagramExporter):
    """Component diagrams as PlantUML class-diagram text."""

    @property
    def format_name(self) -> str:
        return "plantuml"

    def get_file_extension(self) -> str:
        return ".puml"

    def render(self, graph: GraphModel | None) -> str:
        context = self.prepare(graph) if graph is not None else None
        if context is None:
            return self._render_empty(graph)

        lines = ["@startuml"]
        lines.extend(self._render_header(graph))

        for node in context.roots:
            lines.extend(self._render_node(context, node, 0))
        lines.append("")

        if context.edges:
            lines.append("' Relationships")
            for edge in context.edges:
                lines.append(self._render_edge(context, edge))

        lines.append("@enduml")
        return "\n".join(lines) + "\n"

    def _render_header(self, graph: GraphModel) -> list[str]:
        lines = [f"title {self._escape(self.title(graph))}"]
        hints = graph.layout_hints
        if hints.theme:
            lines.append(f"!theme {hints.theme}")
        lines.append(f'skinparam defaultFontName "{self.config.font}"')
        lines.append("skinparam roundCorner 15")
        lines.append(f"skinparam backgroundColor {self.config.background}")
        if hints.direction == "LR":
            lines.append("left to right direction")

        if self.config.skinparams:
            lines.extend([
                "skinparam package {",
                "  BackgroundColor #ffffff",
                "  BorderColor #e2e8f0",
                "  FontColor #1a202c",
                "  BorderThickness 2",
                "}",
                "skinparam class {",
                "  BorderColor #374151",
                "  FontSize 12",
                "}",
                "skinparam arrow {",
                "  Color #6b7280",
                "  Thickness 2",
                "}",
            ])
        lines.append("")
        return lines

    def _render_node(self, context: ExportContext, node: Node, depth: int) -> list[str]:
        pad = INDENT * depth
        identifier = context.identifier(node.id)
        name = self._escape(node.display_name)

        if context.nests(node):
            style = node_style(node.type, None)
            lines = [f'{pad}{style.keyword} "{name}" as {identifier} {style.stereotype} {{']
            for child in context.children.get(node.id, []):
                lines.extend(self._render_node(context, child, depth + 1))
            lines.append(f"{pad}}}")
            return lines

        if context.clustering and is_collapsed_container(node):
            style = node_style(node.type, None)
            note_id = context.ids.derived(node.id, "note")
            return [
                f'{pad}{style.keyword} "{name}" as {identifier} {style.stereotype} {{',
                f"{pad}{INDENT}note as {note_id}",
                f"{pad}{INDENT}{INDENT}{node.component_count} components",
                f"{pad}{INDENT}{INDENT}Click to expand",
                f"{pad}{INDENT}end note",
                f"{pad}}}",
            ]

        style = node_style(node.type, node.role)
        keyword = style.keyword if style.keyword in ("class", "interface", "enum") else "class"
        parts = [f'{pad}{keyword} "{name}" as {identifier}']
        if style.stereotype:
            parts.append(style.stereotype)
        parts.append(style.fill)
        line = " ".join(parts)
        details = self._details(node)
        if details:
            return [line + " {"] + [f"{pad}{INDENT}{detail}" for detail in details] + [f"{pad}}}"]
        return [line]

    @staticmethod
    def _details(node: Node) -> list[str]:
        details = []
        if node.is_container and node.component_count:
            details.append(f"{node.component_count} components")
        method_count = node.metadata.get("method_count")
        if isinstance(method_count, int) and method_count > 0:
            details.append(f"{method_count} methods")
        return details

    def _render_edge(self, context: ExportContext, edge) -> str:
        style = edge_style(edge.type, edge.style)
        line = f"{context.identifier(edge.source_id)} {style.arrow} {context.identifier(edge.target_id)}"
        if edge.label:
            line += f" : {self._escape(edge.label)}"
        return line

    def _render_empty(self, graph: GraphModel | None) -> str:
        lines = [
            "@startuml",
            f"title {self._escape(self.title(graph))}",
            f'rectangle "{EMPTY_STATE_TEXT}" as EmptyState',
            "@enduml",
        ]
        return "\n".join(lines) + "\n"

    @staticmethod
    def _escape(text: str) -> str:
        return text.replace('"', "'").replace("\r", " ").replace("\n", " ")
