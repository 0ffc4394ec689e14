"""
phtmlmin - Whitespace and comment minifier for PHP/HTML templates

Strips insignificant whitespace and comments from hybrid markup/PHP
templates while leaving PHP semantics, heredocs and preformatted content
untouched.
"""

__version__ = "1.0.0"

from .lib import Minifier, WhitespacePipeline, CodeCommentTransformer, LOG, state_connectToLogger

__all__ = [
    "Minifier",
    "WhitespacePipeline",
    "CodeCommentTransformer",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
