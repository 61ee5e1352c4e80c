from .cleanup import cleanup_node
from .complete import complete_node
from .deliver import deliver_node
from .prepare import prepare_node

__all__ = ["cleanup_node", "complete_node", "deliver_node", "prepare_node"]
