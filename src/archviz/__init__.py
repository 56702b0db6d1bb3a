"""archviz - component graph layout and diagram export for codebase inspection.

archviz takes the component graph produced by a source analysis (classes,
screens, services, layers), lays it out with one of several placement
strategies, and serializes it as PlantUML or Graphviz DOT text.
"""

__version__ = "0.1.0"
__author__ = "archviz contributors"
__description__ = "Component graph layout and UML-style diagram export"

from archviz.config import ArchvizConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "ArchvizConfig",
]
