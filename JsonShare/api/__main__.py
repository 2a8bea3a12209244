import logging

import uvicorn

from JsonShare.api.main import create_app
from JsonShare.core.config import get_settings

log = logging.getLogger("jsonshare")


def main():
    settings = get_settings()
    app = create_app(settings)
    log.info("Server running on port %d", settings.PORT)
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
