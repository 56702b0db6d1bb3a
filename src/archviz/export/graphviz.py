"""Graphviz DOT diagram exporter."""

import logging

from ..graph.model import GraphModel
from ..graph.models import Edge, Node
from .base import EMPTY_STATE_TEXT, DiagramExporter, ExportContext, is_collapsed_container
from .styles import edge_style, node_style

logger = logging.getLogger(__name__)

MAX_PENWIDTH = 5


class GraphvizExporter(DiagramExporter):
    """Component diagrams as a DOT digraph.

    Open containers become ``subgraph cluster_N`` blocks holding an invisible
    anchor node, so edges that point at a container are drawn to the
    cluster border (``compound=true`` with ``lhead``/``ltail``).
    """

    @property
    def format_name(self) -> str:
        return "graphviz"

    def get_file_extension(self) -> str:
        return ".dot"

    def render(self, graph: GraphModel | None) -> str:
        context = self.prepare(graph) if graph is not None else None
        if context is None:
            return self._render_empty(graph)

        hints = graph.layout_hints
        lines = [f'digraph "{self._escape(self.title(graph))}" {{']
        lines.append(f"  rankdir={hints.direction};")
        lines.append(f"  ranksep={hints.rank_separation};")
        lines.append(f"  nodesep={hints.node_separation};")
        lines.append(f'  bgcolor="{self.config.background}";')
        lines.append(f'  fontname="{self.config.font}";')
        lines.append("  fontsize=14;")
        lines.append("  compound=true;")
        lines.append("")
        lines.append("  // Node styles")
        lines.append(f'  node [fontname="{self.config.font}", fontsize=12, shape=box, '
                     f'style="rounded,filled", margin=0.1];')
        lines.append(f'  edge [fontname="{self.config.font}", fontsize=10, color="#6b7280"];')
        lines.append("")

        clusters: dict[str, str] = {}
        lines.append("  // Nodes")
        for node in context.roots:
            lines.extend(self._render_node(context, node, clusters, 1))
        lines.append("")

        if context.edges:
            lines.append("  // Edges")
            for edge in context.edges:
                lines.append(self._render_edge(context, edge, clusters))

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _render_node(self, context: ExportContext, node: Node,
                     clusters: dict[str, str], depth: int) -> list[str]:
        pad = "  " * depth
        identifier = context.identifier(node.id)

        if context.nests(node):
            cluster_name = f"cluster_{len(clusters)}"
            clusters[node.id] = cluster_name
            style = node_style(node.type, None)
            lines = [
                f"{pad}subgraph {cluster_name} {{",
                f'{pad}  label="{self._escape(node.display_name)}";',
                f"{pad}  style=filled;",
                f'{pad}  fillcolor="{style.fill}";',
                f'{pad}  fontcolor="#1a202c";',
                f'{pad}  {identifier} [shape=point, style=invis, width=0.01, height=0.01, label=""];',
            ]
            for child in context.children.get(node.id, []):
                lines.extend(self._render_node(context, child, clusters, depth + 1))
            lines.append(f"{pad}}}")
            return lines

        style = node_style(node.type, node.role)
        attributes = [
            f'label="{self._escape(self._label(node))}"',
            f'fillcolor="{style.fill}"',
            f"shape={style.shape}",
        ]
        if is_collapsed_container(node):
            attributes.append('style="rounded,filled,dashed"')
        return [f"{pad}{identifier} [{', '.join(attributes)}];"]

    @staticmethod
    def _label(node: Node) -> str:
        label = node.display_name
        if node.component_count > 0:
            label += f"\n({node.component_count} components)"
        method_count = node.metadata.get("method_count")
        if isinstance(method_count, int) and method_count > 0:
            label += f"\n{method_count} methods"
        return label

    def _render_edge(self, context: ExportContext, edge: Edge, clusters: dict[str, str]) -> str:
        style = edge_style(edge.type, edge.style)
        attributes = [f'color="{style.color}"']
        if style.dash in ("dashed", "dotted"):
            attributes.append(f"style={style.dash}")
        if edge.label:
            attributes.append(f'label="{self._escape(edge.label)}"')

        penwidth = 3 if style.dash == "bold" else 1
        if edge.weight > 1:
            penwidth = max(penwidth, min(MAX_PENWIDTH, edge.weight))
        if penwidth > 1:
            attributes.append(f"penwidth={penwidth}")

        if edge.source_id in clusters:
            attributes.append(f"ltail={clusters[edge.source_id]}")
        if edge.target_id in clusters:
            attributes.append(f"lhead={clusters[edge.target_id]}")

        source = context.identifier(edge.source_id)
        target = context.identifier(edge.target_id)
        return f"  {source} -> {target} [{', '.join(attributes)}];"

    def _render_empty(self, graph: GraphModel | None) -> str:
        lines = [
            f'digraph "{self._escape(self.title(graph))}" {{',
            f'  label="{EMPTY_STATE_TEXT}";',
            f'  empty [label="{EMPTY_STATE_TEXT}", shape=plaintext];',
            "}",
        ]
        return "\n".join(lines) + "\n"

    @staticmethod
    def _escape(text: str) -> str:
        return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
