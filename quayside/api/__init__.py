"""Quayside HTTP API layer.

This package provides the Falcon ASGI application that receives registry
notifications and exposes health probes.

Usage
-----
Create and run the application::

    from quayside.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # webhook and listing endpoints enabled
"""

from quayside.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
