from .compare import handle_compare
from .expand import handle_expand

__all__ = [
  "handle_compare",
  "handle_expand",
]
