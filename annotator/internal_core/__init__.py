from .config import EditorConfig, load_config
from .draft_store import InMemoryDraftStore

__all__ = ["EditorConfig", "load_config", "InMemoryDraftStore"]
