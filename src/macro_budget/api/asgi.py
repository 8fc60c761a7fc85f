"""ASGI entrypoint for the macro budget API."""

import uvicorn

from macro_budget.api.app import create_app
from macro_budget.containers import build_container

container = build_container()
app = create_app(container)


def main() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(app, host=container.settings.host, port=container.settings.port)
