"""
podlang Heuristic Inference Engine

Guesses the language an application was written in by scanning the build
history of its container image for telling commands (npm install, rustc, ...).

- models: Immutable knowledge base and build history value types
- knowledge_base: Load/save of the heuristics.json record
- matcher: First-discovery language inference
- editor: Add-pattern and listing operations
"""

__version__ = "0.1.0"

from .editor import add_pattern, list_heuristics
from .knowledge_base import (
    DEFAULT_HEURISTICS,
    CorruptKnowledgeBase,
    KnowledgeBaseError,
    StorageUnavailable,
    decode_knowledge_base,
    encode_knowledge_base,
    initialize_knowledge_base,
    load_knowledge_base,
    save_knowledge_base,
)
from .matcher import infer
from .models import (
    BuildHistoryEntry,
    EditOutcome,
    EditResult,
    HeuristicEntry,
    KnowledgeBase,
)

__all__ = [
    "__version__",
    # Models
    "HeuristicEntry",
    "KnowledgeBase",
    "BuildHistoryEntry",
    "EditOutcome",
    "EditResult",
    # Store
    "load_knowledge_base",
    "save_knowledge_base",
    "encode_knowledge_base",
    "decode_knowledge_base",
    "initialize_knowledge_base",
    "DEFAULT_HEURISTICS",
    "KnowledgeBaseError",
    "StorageUnavailable",
    "CorruptKnowledgeBase",
    # Engine
    "infer",
    "add_pattern",
    "list_heuristics",
]
