"""structlog 配置 -- 处理服务客户端诊断日志

嵌入方可自行配置 structlog；独立使用时调用 setup_logging()。
"""

import logging
import os

import structlog

from .config import ProcessingConfig

LOG_FORMATS = ("dev", "json")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog，输出经由标准库 logging

    参数为 None 时读取环境变量：
    - DERIVO_LOG_FORMAT: "json" / "dev"（默认）
    - DERIVO_LOG_LEVEL: 默认 INFO
    """
    log_format = log_format or os.environ.get("DERIVO_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("DERIVO_LOG_LEVEL", "INFO")
    if log_format not in LOG_FORMATS:
        log_format = "dev"

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(log_format),
            foreign_pre_chain=pre_chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def bind_service_context(config: ProcessingConfig) -> None:
    """把服务身份绑定到 contextvars，后续日志自动携带"""
    structlog.contextvars.bind_contextvars(
        processing_service=config.service_name,
        processing_api_version=config.api_version,
    )
