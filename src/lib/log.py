"""
Verbosity-gated logging for the minifier

LOG() writes through loguru when the ProgramState connected to the current
context is verbose enough. Library code never has to pass the state around,
and nothing is emitted when no state is connected (plain library use).

Every line carries the template currently being minified, set with
template_context():

    12:01:07 │ DEBUG │ list.phtml           ║ tokenized, 1 raw blocks

Levels:
    1 = run summary (default)
    2 = per template: strategy taken, fallback reasons (-v)
    3 = per stage sizes, cache hits, writes (-vv)
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional
import sys

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

NO_TEMPLATE = "-"

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{extra[template]: <20}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"template": NO_TEMPLATE})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make state.verbosity the threshold for LOG() calls in this context.

    Args:
        state: ProgramState (anything with a verbosity attribute)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when none is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


@contextmanager
def template_context(name: str) -> Iterator[None]:
    """Tag every LOG() line inside the block with a template name"""
    with logger.contextualize(template=name):
        yield


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected verbosity is at least level.

    Args:
        message: Text to emit
        level: Minimum verbosity (see module docstring)
        **kwargs: Passed to loguru (e.g. exception=...)
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
