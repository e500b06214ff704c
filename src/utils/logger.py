#!/usr/bin/env python3
"""
日志系统配置
structlog 负责格式化，模块内继续使用标准 logging.getLogger(__name__)
"""

import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

import structlog

# 这些库在 DEBUG 级别会打印每个请求
NOISY_LIBRARIES = ("httpcore", "httpx", "solana", "websockets")


def setup_structlog(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    use_json: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
    enable_console: bool = True
):
    """
    配置 Structlog

    Args:
        log_level: 日志级别
        log_file: 日志文件路径（可选，按大小轮转）
        use_json: 是否输出 JSON
        max_bytes: 单个日志文件最大字节数
        backup_count: 保留的轮转文件数量
        enable_console: 是否输出到控制台
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.root.handlers.clear()
    logging.root.setLevel(level)

    handlers = []

    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        ))

    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=enable_console and sys.stdout.isatty())

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logging.root.addHandler(handler)

    for lib in NOISY_LIBRARIES:
        logging.getLogger(lib).setLevel(logging.WARNING)

    logger = structlog.get_logger()
    logger.debug("structlog_configured", log_level=log_level, use_json=use_json, log_file=log_file)
    return logger
