"""ASGI entrypoint, e.g. ``uvicorn nutrition_ledger.api.asgi:app``."""

from nutrition_ledger.api.app import create_app
from nutrition_ledger.config import Settings
from nutrition_ledger.containers import build_container

app = create_app(build_container(Settings()))
