#!/usr/bin/env python3
"""
Run the Workforce Platform API server.
"""

import os
import sys


def main() -> None:
    # Make src importable
    repo_root = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, os.path.join(repo_root, "src"))

    import uvicorn

    from config.settings import get_settings
    from services.logging_config import configure_logging

    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_output=settings.json_logs,
        log_file=settings.log_file,
    )

    uvicorn.run(
        "web.app:create_app",
        factory=True,
        host=os.getenv("HOST", settings.api_host),
        port=int(os.getenv("PORT", str(settings.api_port))),
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
