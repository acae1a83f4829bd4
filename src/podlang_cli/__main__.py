"""
podlang CLI entry point.

Usage:
    python -m podlang_cli
    python -m podlang_cli list-heuristics
    python -m podlang_cli add-to-heuristic <language> <command>
"""

from .main import app

if __name__ == "__main__":
    app()
