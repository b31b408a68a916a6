from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # 环境变量名不区分大小写
    )

    # 数据库配置（可选，默认使用 SQLite）
    database_url: str = "sqlite+aiosqlite:///./contributor_analytics.db"

    # 站点地址，用于 RSS 链接
    site_url: str = "http://localhost:3000"

    # 摘要导出配置（可选）
    # output_dir 为空时不导出 markdown 文件
    output_dir: str | None = None
    overwrite_summaries: bool = False
    summary_days_back: int = Field(
        default=7,
        ge=1,
        description="未指定日期范围时向前回溯的天数",
    )

    # 各时间粒度开关
    summary_day_enabled: bool = True
    summary_week_enabled: bool = True
    summary_month_enabled: bool = True

    # 需要生成摘要的仓库（owner/name），为空时使用数据库中的全部仓库
    tracked_repositories: list[str] = Field(default_factory=list)

    # AI 摘要配置
    ai_summary_enabled: bool = False
    ai_api_key: str | None = None
    ai_endpoint: str = "https://openrouter.ai/api/v1/chat/completions"
    ai_model: str = "openai/gpt-4o-mini"
    ai_temperature: float = 0.2
    ai_max_tokens: int = 800
    ai_project_context: str = (
        "An open source project tracked by the contributor analytics dashboard."
    )

    # 定时任务配置
    # 环境变量名：CRON_SECRET
    cron_secret: str | None = Field(
        default=None,
        description="调用 /api/cron/summaries 时需要的 Bearer Token",
        validation_alias="CRON_SECRET",  # 显式指定环境变量名
    )
    scheduler_enabled: bool = False
    scheduler_hour: int = Field(default=1, ge=0, le=23)
    scheduler_minute: int = Field(default=0, ge=0, le=59)

    log_level: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        自定义设置源优先级
        确保环境变量和 .env 文件都能正确读取
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,  # .env 文件
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
