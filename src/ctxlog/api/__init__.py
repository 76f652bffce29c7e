"""
Demo HTTP service for ctxlog.

Quick start::

    from ctxlog.api import create_app

    app = create_app()  # ready for uvicorn
"""

from ctxlog.api.app import create_app

__all__ = ["create_app"]
