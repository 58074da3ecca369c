"""Run the policy validator with uvicorn."""

import uvicorn

from cxpolicy.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cxpolicy.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
