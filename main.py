from contextlib import asynccontextmanager
from datetime import UTC, datetime
import json

from osupp.calculator import init_calculator
from osupp.config import settings
from osupp.dependencies.cache import redis_client
from osupp.difficulty.calculator import OsuDifficultyCalculator
from osupp.log import system_logger
from osupp.router import performance_router

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    # === on startup ===
    await init_calculator()
    if settings.enable_attributes_cache:
        system_logger("AttributesCache").info(
            f"Attributes cache enabled - version: {OsuDifficultyCalculator.VERSION}, "
            f"expire: {settings.attributes_cache_expire}s"
        )

    yield

    # === on shutdown ===
    await redis_client.aclose()


desc = """osu!standard 难度与表现分计算服务。

## 端点说明

- `GET /available_rulesets` 可用的规则集
- `POST /difficulty` 计算谱面的难度属性（星数与各项技能难度）
- `POST /performance` 根据难度属性或谱面计算成绩的表现分 (pp)

谱面需要提供已解码、已堆叠的物件列表，物件按开始时间排序。
"""

app = FastAPI(
    title="osupp",
    version="0.1.0",
    lifespan=lifespan,
    description=desc,
)

app.include_router(performance_router)


@app.get("/", include_in_schema=False)
async def root():
    """根端点"""
    return {"message": "osupp 计算服务正在运行"}


@app.get("/health", include_in_schema=False)
async def health_check():
    """健康检查端点"""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": json.dumps(exc.errors(), default=str),
        },
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,  # 禁用uvicorn默认日志配置
        access_log=True,  # 启用访问日志
    )
