from apscheduler.schedulers.asyncio import AsyncIOScheduler

from contributor_analytics.core.config import settings
from contributor_analytics.tasks import jobs


class SchedulerWrapper:
    def __init__(self) -> None:
        self._scheduler = AsyncIOScheduler()
        self._job_id = "generate_summaries_daily"
        self._is_configured = False

    def _configure_jobs(self) -> None:
        if self._is_configured:
            return

        # 摘要生成任务（每天固定时间执行）
        self._scheduler.add_job(
            jobs.generate_summaries_job,
            "cron",
            hour=settings.scheduler_hour,
            minute=settings.scheduler_minute,
            id=self._job_id,
            replace_existing=True,
        )

        self._is_configured = True

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def start(self) -> None:
        if not self._scheduler.running:
            self._configure_jobs()
            self._scheduler.start()

    async def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)


scheduler = SchedulerWrapper()
