"""Web layer — aiohttp app serving the pages and JSON API."""

from src.web.app import create_web_app, start_web_server

__all__ = ["create_web_app", "start_web_server"]
