"""
role_hierarchy.api.__main__

Entrypoint for `python -m role_hierarchy.api`.

Responsibilities:
- Load settings, create the app and serve it with uvicorn.
"""

from __future__ import annotations

import uvicorn

from role_hierarchy.api.app import create_app
from role_hierarchy.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog owns log output
    )


if __name__ == "__main__":
    main()
