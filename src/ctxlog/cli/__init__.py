"""ctxlog command-line interface."""

from ctxlog.cli.app import app

__all__ = ["app"]
