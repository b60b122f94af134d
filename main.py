"""ASGI entry point: ``uvicorn main:app --reload``."""
from homeledger.main import app  # noqa: F401
