"""Production entrypoint: run the app under uvicorn."""
from __future__ import annotations

import uvicorn

from data_aggregator.config import load_settings


def main() -> None:
    settings = load_settings()
    # log_config=None keeps the handlers installed by setup_logging
    uvicorn.run(
        "data_aggregator.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
