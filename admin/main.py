from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
import uvicorn

from admin.config import settings
from admin.log_config_loader import setup_logging
from admin.router import router as admin_router
from admin.services.dtab import DtabService

setup_logging(
    service_name=settings.SERVICE_NAME,
    level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    version=settings.SERVICE_VERSION,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        DtabService.load_base(settings.DTAB_BASE)
    except ValueError:
        logger.exception('Invalid base dtab', extra={'dtab': settings.DTAB_BASE})
        raise
    logger.info(
        'Admin API started',
        extra={
            'separator': settings.SCOPE_SEPARATOR,
            'stats_format': settings.STATS_FORMAT,
        },
    )
    try:
        yield
    finally:
        logger.info('Shutdown complete')


app = FastAPI(lifespan=lifespan)


@app.get('/health')
async def health_check() -> dict[str, str]:
    logger.debug('Health check...')
    return {'status': 'ok'}


app.include_router(admin_router)


def main() -> None:
    uvicorn.run(
        'admin.main:app',
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == '__main__':
    main()
