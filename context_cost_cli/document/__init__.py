"""Document host and context persistence."""

from context_cost_cli.document.host import Document
from context_cost_cli.document.host import DocumentKind

__all__ = ["Document", "DocumentKind"]
