# app/main.py
import logging
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

from app.api.routers import router as api_router
from app.core import models  # noqa: F401  注册表结构到 Base.metadata
from app.core.config import get_settings
from app.core.exceptions import FeedbackServiceError
from app.services.credit_gate import ensure_counter
from app.utils.database import Base, get_engine, get_sessionmaker

settings = get_settings()

logging.basicConfig(stream=sys.stdout, level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 服务正在启动...")
    # 1. 自动创建表结构
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ 表结构已同步")

    # 2. 初始化额度计数器 (与当前配置一致)
    async with get_sessionmaker()() as session:
        await ensure_counter(session, get_settings().MAX_CREDITS)

    yield

    await get_engine().dispose()
    logger.info("🛑 服务正在关闭...")

app = FastAPI(title="Feedback Sentiment Analyzer", lifespan=lifespan)

# CORS 设置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 异常处理
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(FeedbackServiceError)
async def service_exception_handler(request: Request, exc: FeedbackServiceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

# 兜底：未分类异常也返回 JSON
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("❌ 未知错误: %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

@app.get("/health")
async def health():
    return {"status": "ok"}

# 注册路由
app.include_router(api_router, prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
