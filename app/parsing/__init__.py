"""
app/parsing package marker.
"""

from app.parsing.line_tokenizer import tokenize_line

__all__ = [
    "tokenize_line",
]
