"""Evaluator helper modules for the SL runtime."""

__all__ = [
    "blocks",
    "common",
    "control",
    "expr",
    "fn",
    "loops",
]
