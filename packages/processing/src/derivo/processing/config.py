"""ProcessingConfig -- 处理服务配置加载

显式构造并注入 ProcessingService，不使用全局单例。
可从环境变量加载，不硬编码服务地址。
"""

import os

import structlog
from pydantic import BaseModel, Field, field_validator

log = structlog.get_logger()

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_MAX_CONNECTIONS = 20


class ProcessingConfig(BaseModel):
    """处理服务配置 -- 从环境变量加载

    环境变量:
        DERIVO_PROCESSING_URL: 服务基础 URL（默认 http://localhost:8080）
        DERIVO_PROCESSING_NAME: 服务名称
        DERIVO_PROCESSING_API_VERSION: API 版本
        DERIVO_PROCESSING_TIMEOUT_S: 请求超时（秒，默认 30）
        DERIVO_PROCESSING_MAX_CONNECTIONS: 连接池上限（默认 20）
    """

    service_base_url: str = Field(
        default="http://localhost:8080",
        description="处理服务基础 URL",
    )
    service_name: str = Field(default="processing", description="服务名称")
    api_version: str = Field(default="v2", description="Processing API 版本")
    timeout_s: float = Field(
        default=DEFAULT_TIMEOUT_S,
        gt=0,
        description="RESOLVED 模式下 HTTP 请求超时（秒）",
    )
    max_connections: int = Field(
        default=DEFAULT_MAX_CONNECTIONS,
        ge=1,
        description="共享 HTTP 连接池上限",
    )

    @field_validator("service_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        # 拼接路径时统一以 "/process/..." 开头
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("service_base_url 不能为空")
        return value


def load_processing_config() -> ProcessingConfig:
    """从环境变量加载处理服务配置

    环境变量映射:
        DERIVO_PROCESSING_URL -> service_base_url
        DERIVO_PROCESSING_NAME -> service_name
        DERIVO_PROCESSING_API_VERSION -> api_version
        DERIVO_PROCESSING_TIMEOUT_S -> timeout_s (默认 30)
        DERIVO_PROCESSING_MAX_CONNECTIONS -> max_connections (默认 20)

    Returns:
        ProcessingConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("DERIVO_PROCESSING_URL"):
        kwargs["service_base_url"] = val

    if val := os.environ.get("DERIVO_PROCESSING_NAME"):
        kwargs["service_name"] = val

    if val := os.environ.get("DERIVO_PROCESSING_API_VERSION"):
        kwargs["api_version"] = val

    if val := os.environ.get("DERIVO_PROCESSING_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = float(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="DERIVO_PROCESSING_TIMEOUT_S",
                value=val,
                fallback=DEFAULT_TIMEOUT_S,
            )

    if val := os.environ.get("DERIVO_PROCESSING_MAX_CONNECTIONS"):
        try:
            kwargs["max_connections"] = int(val)
        except ValueError:
            log.warning(
                "invalid_max_connections_config",
                env_var="DERIVO_PROCESSING_MAX_CONNECTIONS",
                value=val,
                fallback=DEFAULT_MAX_CONNECTIONS,
            )

    return ProcessingConfig(**kwargs)
