"""
Template minifier

Produces a compacted copy of a hybrid HTML/PHP template and caches it
under the materialization directory.

Pipeline per template:
1. Strip single-line PHP comments with the code-aware transformer
2. If the transformer gives up, stash raw blocks so the text passes cannot
   reach into them
3. Run the six whitespace stages
4. Restore raw blocks, right-trim, write the cache entry

Usage:
    minifier = Minifier(root_dir="/srv/shop")
    minifier.minified_get("/srv/shop/app/view/list.phtml")
    # -> /srv/shop/var/view_preprocessed/app/view/list.phtml
"""

from pathlib import Path
from typing import List, Optional, Tuple

from ..config import appsettings, AppSettings
from ..models.minifier import MinifyResult, Strategy, TransformErr
from .filesystem import DirectoryRead, DirectoryWrite, PathLike
from .log import LOG, template_context
from .pipeline import WhitespacePipeline
from .rawblocks import rawblocks_extract, rawblocks_restore
from .transformer import CodeCommentTransformer


# Same set as PHP rtrim(); Unicode spaces are content
TRAILING_WHITESPACE = " \t\n\r\0\x0b"


class Minifier:
    """
    Minifies templates and manages their cached copies

    Args:
        root_dir: Root directory cache paths are derived from
        settings: Application settings (placeholder marker, inline tags, ...)
        transformer: Code comment transformer (defaults to the Pygments one)
        pipeline: Whitespace pipeline (defaults to one using settings.inline_tags)
    """

    def __init__(
        self,
        root_dir: PathLike = ".",
        settings: AppSettings = appsettings,
        transformer: Optional[CodeCommentTransformer] = None,
        pipeline: Optional[WhitespacePipeline] = None,
    ) -> None:
        self.settings = settings
        self.htmlDirectory = DirectoryWrite(root_dir, settings.materialization_dir)
        self.transformer = transformer or CodeCommentTransformer(settings)
        self.pipeline = pipeline or WhitespacePipeline(settings.inline_tags)
        # One entry per cache entry written, in order
        self.results: List[MinifyResult] = []

    def minified_get(self, file: PathLike) -> Path:
        """
        Return path to minified template file, minifying it first if absent

        Args:
            file: Source template path

        Returns:
            Absolute path of the cache entry
        """
        file = self.htmlDirectory.path_resolve(file)
        if not self.htmlDirectory.exists(self.relativeGeneratedPath_get(file)):
            self.minify(file)
        return self.minifiedPath_get(file)

    def minifiedPath_get(self, file: PathLike) -> Path:
        """Return path to minified template file"""
        return self.htmlDirectory.path_absolute(self.relativeGeneratedPath_get(file))

    def minify(self, file: PathLike) -> MinifyResult:
        """
        Minify a template file and write its cache entry

        A missing or empty source produces an empty cache entry.

        Args:
            file: Source template path

        Returns:
            MinifyResult describing what was written
        """
        source = self.htmlDirectory.path_resolve(file)
        content = DirectoryRead(source.parent).file_read(source.name) or ""

        with template_context(source.name):
            minified, strategy, block_count = self.content_process(content)
            LOG(f"{strategy.value}, {block_count} raw blocks", level=2)

            if not self.htmlDirectory.exists():
                self.htmlDirectory.create()
            target = self.htmlDirectory.file_write(self.relativeGeneratedPath_get(source), minified)

        result = MinifyResult(
            source=source,
            target=target,
            strategy=strategy,
            raw_blocks=block_count,
            size_in=len(content),
            size_out=len(minified),
        )
        self.results.append(result)
        return result

    def content_minify(self, content: Optional[str]) -> str:
        """
        Minify template text in memory

        Args:
            content: Template text (None is treated as empty)

        Returns:
            Minified, right-trimmed text
        """
        return self.content_process(content)[0]

    def content_process(self, content: Optional[str]) -> Tuple[str, Strategy, int]:
        """
        Run the full minification on template text

        Returns:
            (minified text, strategy used, number of raw blocks restored)
        """
        content = content or ""
        heredocs: Optional[List[str]] = None
        strategy = Strategy.TOKENIZED

        # Safely remove single-line PHP comments by using a tokenizer
        result = self.transformer.transform(content)
        if isinstance(result, TransformErr):
            # Some PHP code is seemingly invalid, or too complex
            LOG(f"Comment stripping skipped ({result.reason.value}): {result.detail}", level=2)
        else:
            content = result.text
            heredocs = result.delayed_blocks

        # Stash the heredocs now if the template could not be tokenized
        if heredocs is None:
            strategy = Strategy.FALLBACK
            stashed = rawblocks_extract(content, self.settings)
            content = stashed.content
            heredocs = stashed.blocks

        content = self.pipeline.run(content)
        content = rawblocks_restore(content, heredocs, self.settings)

        return content.rstrip(TRAILING_WHITESPACE), strategy, len(heredocs)

    def relativeGeneratedPath_get(self, sourcePath: PathLike) -> Path:
        """Relative path of a minified file inside the materialization directory"""
        return self.htmlDirectory.path_relative(self.htmlDirectory.path_resolve(sourcePath))
