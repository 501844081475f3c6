"""
origin_registry.api.__main__

`python -m origin_registry.api`: serve the registry with uvicorn.

Refuses to start in prod with the built-in development JWT secret, since
every token signed with it would be forgeable.
"""

from __future__ import annotations

import uvicorn

from origin_registry.api.app import create_app
from origin_registry.settings import DEV_JWT_SECRET, Settings, get_settings


class UnsafeSettingsError(RuntimeError):
    pass


def check_runtime_settings(settings: Settings) -> None:
    if settings.env == "prod" and settings.jwt_secret == DEV_JWT_SECRET:
        raise UnsafeSettingsError("ORIGIN_JWT_SECRET must be set when ORIGIN_ENV=prod")


def main() -> None:
    settings = get_settings()
    check_runtime_settings(settings)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        log_config=None,  # structlog owns formatting
        access_log=False,  # RequestContextMiddleware emits request_completed
    )


if __name__ == "__main__":
    main()
