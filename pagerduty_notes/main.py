import logging

from dotenv import load_dotenv
from fastapi import FastAPI

from pagerduty_notes.config import get_settings

# PAGERDUTY_* 凭证可以放在 .env，需在读取 Settings 之前加载
load_dotenv()

logging.basicConfig(
    level=getattr(logging, get_settings().LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

from pagerduty_notes.api.routes import router as api_router


def create_app() -> FastAPI:
    """
    Rundeck webhook 接收端：/api/notifications[/{trigger}] 转给 TriggerHandler 写 PagerDuty note。
    """
    settings = get_settings()
    if not settings.WEBHOOK_SHARED_SECRET:
        logger = logging.getLogger(__name__)
        logger.warning("WEBHOOK_SHARED_SECRET is not set, notification endpoints are unauthenticated")

    app = FastAPI(
        title="Rundeck PagerDuty Notes",
        version="0.1.0",
    )
    app.include_router(api_router, prefix="/api")

    @app.get("/health", summary="健康检查")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
