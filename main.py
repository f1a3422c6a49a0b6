"""
Eunoia Agent Service - Main Entry Point
"""
import uvicorn
from eunoia.config.settings import settings


def main():
    """启动Eunoia Agent服务"""
    uvicorn.run(
        "eunoia.user_interaction.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
