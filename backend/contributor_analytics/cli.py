"""命令行入口

Commands:
    init-db   -- 创建数据表
    serve     -- 启动 API 服务（含 RSS 与定时任务）
    generate  -- 运行日/周/月摘要流水线
"""

from __future__ import annotations

import asyncio
import json
import logging

import click

from contributor_analytics.core.config import settings
from contributor_analytics.services.intervals import (
    DateRange,
    InvalidDateRangeError,
    default_date_range,
    validate_date_range,
)

logger = logging.getLogger("contributor_analytics.cli")


def _resolve_date_range(start_date: str | None, end_date: str | None, days: int | None) -> DateRange | None:
    if start_date or end_date:
        if not (start_date and end_date):
            raise click.BadParameter("--start-date 和 --end-date 需要同时指定")
        date_range = DateRange(start_date=start_date, end_date=end_date)
        validate_date_range(date_range)
        return date_range
    if days:
        return default_date_range(days)
    return None


@click.group()
@click.option("--log-level", default=None, help="日志级别，默认读取 LOG_LEVEL")
def main(log_level: str | None) -> None:
    """Contributor Analytics 摘要工具"""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@main.command("init-db")
def init_db() -> None:
    """创建数据表"""
    from contributor_analytics.core.db import init_models

    asyncio.run(init_models())
    click.echo("数据库初始化完成")


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="监听地址")
@click.option("--port", default=8000, type=int, show_default=True, help="监听端口")
@click.option("--reload", is_flag=True, help="代码变更时自动重启（开发用）")
def serve(host: str, port: int, reload: bool) -> None:
    """启动 API 服务（含 RSS 与定时任务）"""
    import uvicorn

    logger.info(f"启动服务: http://{host}:{port}")
    uvicorn.run(
        "contributor_analytics.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@main.command()
@click.option("--start-date", default=None, help="开始日期 YYYY-MM-DD（包含）")
@click.option("--end-date", default=None, help="结束日期 YYYY-MM-DD（不包含）")
@click.option("--days", default=None, type=click.IntRange(min=1), help="最近 N 天")
@click.option("--overwrite/--no-overwrite", default=None, help="覆盖已存在的摘要")
@click.option("--repo", "repos", multiple=True, help="仓库 owner/name，可重复指定")
def generate(
    start_date: str | None,
    end_date: str | None,
    days: int | None,
    overwrite: bool | None,
    repos: tuple[str, ...],
) -> None:
    """运行日/周/月摘要流水线"""
    from contributor_analytics.core.db import init_models
    from contributor_analytics.services.summarize.runner import summary_pipeline

    try:
        date_range = _resolve_date_range(start_date, end_date, days)
    except InvalidDateRangeError as e:
        raise click.BadParameter(str(e))

    async def run() -> dict:
        await init_models()
        report = await summary_pipeline.run_once(
            date_range=date_range,
            overwrite=overwrite,
            repositories=list(repos) or None,
        )
        return report.as_dict()

    result = asyncio.run(run())
    click.echo(json.dumps(result, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
