"""
phtmlmin - Whitespace and comment minifier for PHP/HTML templates

Produces cached, byte-reduced copies of .phtml templates without changing
their rendered output or PHP semantics.
"""

__version__ = "1.0.0"

from .minifier import Minifier
from .pipeline import WhitespacePipeline
from .transformer import CodeCommentTransformer
from .rawblocks import rawblocks_extract, rawblocks_restore
from .log import LOG, state_connectToLogger, template_context

__all__ = [
    "Minifier",
    "WhitespacePipeline",
    "CodeCommentTransformer",
    "rawblocks_extract",
    "rawblocks_restore",
    "LOG",
    "state_connectToLogger",
    "template_context",
    "__version__",
]
