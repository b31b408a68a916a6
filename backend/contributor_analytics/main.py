import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contributor_analytics.core.config import settings
from contributor_analytics.core.db import init_models
from contributor_analytics.tasks.scheduler import scheduler
from .routers import cron, rss, summary

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Contributor Analytics API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # API 路由
    app.include_router(summary.router, prefix="/api")
    app.include_router(cron.router, prefix="/api")

    # RSS 挂在根路径 /rss.xml
    app.include_router(rss.router)

    @app.get("/")
    async def read_root():
        return {"message": "Contributor Analytics API", "docs": "/docs", "rss": "/rss.xml"}

    @app.on_event("startup")
    async def startup_event() -> None:
        try:
            logger.info("正在初始化数据库...")
            await init_models()
            logger.info("数据库初始化完成")

            if settings.scheduler_enabled:
                logger.info("正在启动摘要定时任务...")
                await scheduler.start()
                logger.info(
                    f"摘要定时任务已启动，每天 {settings.scheduler_hour:02d}:{settings.scheduler_minute:02d} 执行"
                )

            logger.info("应用启动完成！")
        except Exception as e:
            logger.error(f"应用启动失败: {e}", exc_info=True)
            # 不抛出异常，让服务器继续运行（RSS 等只读接口仍可用）
            logger.warning("应用将继续运行，但某些功能可能不可用")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        try:
            await scheduler.stop()
            logger.info("摘要定时任务已停止")
        except Exception as e:
            logger.error(f"停止摘要定时任务时出错: {e}", exc_info=True)

    return app


app = create_app()
