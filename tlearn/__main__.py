"""t-learn entrypoint.

Run with:
  python -m tlearn
"""

import uvicorn

from tlearn.core.config import get_settings


def main() -> None:
    # fail fast on bad configuration before uvicorn starts
    settings = get_settings()
    uvicorn.run(
        "tlearn.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()
