"""
Program state for the CLI run

ProgramState is the state bus handed from one CLI stage to the next; each
stage returns a copy with its own fields filled in. MinifyReport tallies
what templates_minify did for results_report.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Callable, List, Optional, Type, TypeVar

from .minifier import MinifyResult, Strategy


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class MinifyReport:
    """
    Totals over one CLI run

    Attributes:
        minified: Templates written in this run
        cached: Templates whose existing cache entry was kept
        fallback: Written templates that could not be tokenized
        size_in: Characters read from written templates
        size_out: Characters written
    """
    minified: int = 0
    cached: int = 0
    fallback: int = 0
    size_in: int = 0
    size_out: int = 0

    def result_add(self, result: MinifyResult) -> None:
        self.minified += 1
        self.size_in += result.size_in
        self.size_out += result.size_out
        if result.strategy is Strategy.FALLBACK:
            self.fallback += 1

    @property
    def saved(self) -> int:
        return self.size_in - self.size_out


@dataclass
class ProgramState:
    """
    State carried through env_check -> templates_find -> templates_minify
    -> results_report.

    CLI fields:
        inputdir: Root directory holding the templates
        outputdir: Materialization directory (None = configured default under root)
        verbosity: LOG threshold
        pattern: Template glob (None = configured default)
        force: Re-minify templates that already have a cache entry

    Filled in by the stages:
        envOK, rootDir, cacheDir (env_check)
        templates (templates_find)
        minifyReport (templates_minify)
    """

    inputdir: Optional[Path] = None
    outputdir: Optional[Path] = None
    verbosity: int = 1
    pattern: Optional[str] = None
    force: bool = False

    envOK: bool = False
    rootDir: Path = field(default=Path("/"))
    cacheDir: Path = field(default=Path("/"))
    templates: List[Path] = field(default_factory=list)
    minifyReport: Optional[MinifyReport] = None

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Initial state from the parsed CLI options and the plugin directories.

        Options that are not ProgramState fields (e.g. argparse internals
        added by the plugin wrapper) are ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        options_known = {k: v for k, v in vars(options).items() if k in known}
        return cls(**{**options_known, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy, so a stage never mutates its input state"""
        return dataclasses.replace(self)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Thread a state through stage functions, left to right.

    Example:
        pipeline(state, env_check, templates_find, templates_minify, results_report)
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
