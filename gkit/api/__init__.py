"""
gkit REST API

FastAPI routes generated from the command registry.
"""

from .server import create_app, route_path, run_server

__all__ = ["create_app", "route_path", "run_server"]
