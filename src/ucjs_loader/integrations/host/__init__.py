from ucjs_loader.integrations.host.abc import DocumentListener, Host
from ucjs_loader.integrations.host.console import ConsoleHost
from ucjs_loader.integrations.host.types import Document, DocumentEvent

__all__ = ["ConsoleHost", "Document", "DocumentEvent", "DocumentListener", "Host"]
