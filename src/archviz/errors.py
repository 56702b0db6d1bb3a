"""Exception types raised by archviz.

Rejected edges, unknown styles and redundant expand/collapse calls are logged
and ignored. The exceptions below cover a broken node forest, duplicate ids in
strict mode, unknown registry names and unreadable snapshots.
"""


class ArchvizError(Exception):
    """Base class for archviz errors."""
    pass


class DuplicateNodeError(ArchvizError):
    """Raised in strict id mode when a node id is added twice."""

    def __init__(self, node_id: str):
        super().__init__(f"Node with id {node_id!r} already exists")
        self.node_id = node_id


class HierarchyError(ArchvizError):
    """Raised when a parent link would break the node forest."""
    pass


class UnknownLayoutError(ArchvizError, ValueError):
    """Raised when a layout strategy name is not registered."""
    pass


class UnknownFormatError(ArchvizError, ValueError):
    """Raised when an export format name is not registered."""
    pass


class SnapshotError(ArchvizError):
    """Raised when an analysis snapshot file cannot be read."""
    pass
