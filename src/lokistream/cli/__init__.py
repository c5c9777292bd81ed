"""lokistream command-line interface."""

from lokistream.cli.app import app

__all__ = ["app"]
