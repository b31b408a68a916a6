"""定时任务测试"""

import asyncio

from contributor_analytics.tasks import jobs
from contributor_analytics.tasks.scheduler import SchedulerWrapper


def test_job_swallows_pipeline_errors(monkeypatch, caplog):
    class FailingPipeline:
        async def run_once(self, **kwargs):
            raise RuntimeError("database is locked")

    monkeypatch.setattr(jobs, "summary_pipeline", FailingPipeline())

    asyncio.run(jobs.generate_summaries_job())

    assert "database is locked" in caplog.text


def test_scheduler_registers_daily_job_once():
    wrapper = SchedulerWrapper()

    wrapper._configure_jobs()
    wrapper._configure_jobs()

    jobs_list = wrapper._scheduler.get_jobs()
    assert [job.id for job in jobs_list] == ["generate_summaries_daily"]
    assert not wrapper.running
