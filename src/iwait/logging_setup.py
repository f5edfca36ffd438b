"""Console logging for the CLI, rendered through rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "iwait-cli"


def setup_logging(*, verbose: bool = False, log: bool = False) -> logging.Logger:
    """Attach a stderr RichHandler to the ``iwait`` logger.

    DEBUG with ``verbose``, INFO with ``log``, WARNING otherwise. Calling it
    again replaces the previous handler instead of stacking another.
    """
    if verbose:
        level = logging.DEBUG
    elif log:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger("iwait")
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(level)
    return root
