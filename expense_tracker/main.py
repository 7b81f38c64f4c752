"""ASGI entrypoint: ``uvicorn expense_tracker.main:app``."""

from expense_tracker.core.app import create_app

app = create_app()
