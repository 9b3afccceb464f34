"""Entry point — `python -m budget_api` serves the API with uvicorn.

Host and port come from settings (API_HOST / API_PORT).
"""

import uvicorn

from budget_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "budget_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
