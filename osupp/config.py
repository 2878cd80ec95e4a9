# ruff: noqa: I002
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # 服务器设置
    host: Annotated[
        str,
        Field(default="0.0.0.0", description="服务器监听地址"),
        "服务器设置",
    ]
    port: Annotated[
        int,
        Field(default=5225, description="服务器监听端口"),
        "服务器设置",
    ]
    debug: Annotated[
        bool,
        Field(default=False, description="是否启用调试模式"),
        "服务器设置",
    ]

    # 日志设置
    log_level: Annotated[
        str,
        Field(default="INFO", description="日志级别"),
        "日志设置",
    ]
    log_to_file: Annotated[
        bool,
        Field(default=False, description="是否将日志写入 logs/ 目录"),
        "日志设置",
    ]

    # 计算器设置
    calculator: Annotated[
        str,
        Field(default="native", description="表现分计算器"),
        "计算器设置",
    ]
    calculator_config: Annotated[
        dict[str, Any],
        Field(default={}, description="表现分计算器配置 (JSON 格式)"),
        "计算器设置",
    ]
    parallel_skills: Annotated[
        bool,
        Field(default=False, description="是否在线程池中并行计算各项技能"),
        "计算器设置",
    ]
    skill_workers: Annotated[
        int,
        Field(default=4, ge=1, description="并行计算技能时的线程数"),
        "计算器设置",
    ]

    # 缓存设置
    enable_attributes_cache: Annotated[
        bool,
        Field(default=False, description="是否启用 Redis 难度属性缓存"),
        "缓存设置",
    ]
    redis_url: Annotated[
        str,
        Field(default="redis://127.0.0.1:6379/0", description="Redis 连接 URL"),
        "缓存设置",
    ]
    attributes_cache_expire: Annotated[
        int,
        Field(default=60 * 60 * 24, description="难度属性缓存过期时间（秒）"),
        "缓存设置",
    ]

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


settings = Settings()  # pyright: ignore[reportCallIssue]
