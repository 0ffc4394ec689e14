#!/usr/bin/env python3
"""
phtmlmin - Whitespace and comment minifier for PHP/HTML templates

Produces a compacted copy of every template under an input (root)
directory, cached under an output (materialization) directory at the
template's root-relative path. Templates with an existing cache entry are
skipped unless --force is given.

The entry point is a ChRIS plugin, so the same tool runs from a shell or
as a containerized ChRIS processing step.

What is removed:
    - Single-line PHP comments (via a PHP tokenizer, with a text fallback)
    - "//" comments inside <script> bodies
    - Insignificant whitespace between tags and after PHP blocks

What is never touched:
    - Heredoc and nowdoc blocks (<<<EOT ... EOT;)
    - Whitespace inside <pre>, <textarea> and <script> bodies
    - The space after inline elements (<span>a</span> <b>b</b>)

Usage:
    phtmlmin inputdir/ outputdir/ [--pattern '**/*.phtml'] [--force] [-v]

Examples:
    # Minify all templates of a project
    phtmlmin /srv/shop /srv/shop/var/view_preprocessed

    # Only one module, regenerating existing entries, with per-file details
    phtmlmin /srv/shop /tmp/minified --pattern 'app/code/Catalog/**/*.phtml' --force -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Minifier, __version__, LOG, state_connectToLogger
from .models import MinifyReport, ProgramState, pipeline


DISPLAY_TITLE = r"""
        _     _             _           _
  _ __ | |__ | |_ _ __ ___ | |_ __ ___ (_)_ __
 | '_ \| '_ \| __| '_ ` _ \| | '_ ` _ \| | '_ \
 | |_) | | | | |_| | | | | | | | | | | | | | | |
 | .__/|_| |_|\__|_| |_| |_|_|_| |_| |_|_|_| |_|
 |_|
  PHP/HTML template minifier
"""

# Define CLI arguments
parser = ArgumentParser(
    description="phtmlmin - Whitespace and comment minifier for PHP/HTML templates",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=None,
    type=str,
    help=f"Glob selecting templates relative to inputdir (default: {appsettings.template_glob})",
)

parser.add_argument(
    "--force",
    action="store_true",
    help="Re-minify templates that already have a cached copy",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the root and cache directories.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - rootDir: Resolved input (root) directory
            - cacheDir: Created materialization directory
            - envOK: True if environment is valid

    Exits:
        1 if the input directory does not exist
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.rootDir = state.inputdir.resolve()
    LOG(f"Root directory: {state.rootDir}", level=2)

    state.cacheDir = Path(state.outputdir or state.rootDir / appsettings.materialization_dir)
    state.cacheDir.mkdir(parents=True, exist_ok=True)
    state.cacheDir = state.cacheDir.resolve()
    LOG(f"Materialization directory: {state.cacheDir}", level=2)

    state.envOK = True
    return state


def templates_find(inputstate: ProgramState) -> ProgramState:
    """
    Collect template files under the root directory.

    Files inside the materialization directory are skipped so a cache
    nested in the root is never minified again.

    Args:
        inputstate: Program state with rootDir and cacheDir set

    Returns:
        ProgramState with added field:
            - templates: Sorted list of template paths
    """

    state = inputstate.copy()

    pattern = state.pattern or appsettings.template_glob
    LOG(f"Searching {state.rootDir} for {pattern}...", level=1)

    state.templates = sorted(
        path for path in state.rootDir.glob(pattern)
        if path.is_file() and not path.resolve().is_relative_to(state.cacheDir)
    )
    LOG(f"Found {len(state.templates)} templates", level=2)
    return state


def templates_minify(inputstate: ProgramState) -> ProgramState:
    """
    Minify every collected template into the materialization directory.

    Args:
        inputstate: Program state with templates collected

    Returns:
        ProgramState with added field:
            - minifyReport: MinifyReport with counts and sizes

    Exits:
        1 if a template cannot be read or written
    """

    state = inputstate.copy()

    LOG("Minifying templates...", level=1)

    minifier = Minifier(
        root_dir=state.rootDir,
        settings=appsettings.model_copy(update={"materialization_dir": str(state.cacheDir)}),
    )
    report = MinifyReport()

    for template in state.templates:
        written = len(minifier.results)
        try:
            if state.force:
                minifier.minify(template)
            else:
                minifier.minified_get(template)
        except (OSError, ValueError) as e:
            print(f"Error minifying {template}: {e}", file=sys.stderr)
            if state.verbosity >= 3:
                import traceback

                traceback.print_exc()
            sys.exit(1)

        if len(minifier.results) == written:
            report.cached += 1
            LOG(f"  cached   {template.relative_to(state.rootDir)}", level=3)
            continue

        result = minifier.results[-1]
        report.result_add(result)
        LOG(f"  minified {template.relative_to(state.rootDir)} ({result.strategy.value})", level=2)

    state.minifyReport = report
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display minification results to user.

    Args:
        inputstate: Program state with minifyReport populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if minifyReport is None
    """
    state: ProgramState = inputstate.copy()
    if state.minifyReport is None:
        print("Error: Minification failed", file=sys.stderr)
        sys.exit(1)

    report = state.minifyReport
    LOG("\n✓ Minification complete!", level=1)
    LOG(f"  Output:   {state.cacheDir}", level=1)
    LOG(f"  Minified: {report.minified} ({report.fallback} without PHP tokenizing)", level=1)
    LOG(f"  Cached:   {report.cached}", level=1)
    LOG(f"  Saved:    {report.saved} characters", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="phtmlmin - PHP/HTML template minifier",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - minify all templates under inputdir into outputdir.

    Orchestrates the full pipeline:
        1. env_check: Validate and resolve directories
        2. templates_find: Collect templates matching the pattern
        3. templates_minify: Minify each template (or reuse its cache entry)
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - pattern: Optional[str] - Template glob
            - force: bool - Regenerate existing cache entries
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Root directory holding the templates
        outputdir: Materialization directory for minified copies

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    # Execute minification pipeline
    pipeline(state, env_check, templates_find, templates_minify, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
