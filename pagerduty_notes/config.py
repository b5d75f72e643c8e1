from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    全局配置，从环境变量 / .env 中读取。
    """

    # PagerDuty 凭证（Rundeck 通知配置缺失时兜底使用）
    PAGERDUTY_API_TOKEN: str | None = None
    PAGERDUTY_REQUESTER_EMAIL: str | None = None

    # PagerDuty REST API
    PAGERDUTY_API_BASE: str = "https://api.pagerduty.com"
    PAGERDUTY_TIMEOUT_S: float = 10.0

    # 从哪个 job option 读取 incident id
    INCIDENT_ID_OPTION: str = "incident_id"

    # webhook 共享密钥：设置后请求需带 X-Webhook-Token 头或 ?token= 参数
    WEBHOOK_SHARED_SECRET: str | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    获取全局单例配置实例。
    """
    return Settings()
