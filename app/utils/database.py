# app/utils/database.py
from functools import lru_cache
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool
from app.core.config import get_settings

# 1. 定义模型基类
Base = declarative_base()

# 2. 创建异步引擎 (懒加载，配置变化后可 cache_clear 重建)
@lru_cache()
def get_engine():
    settings = get_settings()
    url = settings.SQLALCHEMY_DATABASE_URL

    if url.startswith("sqlite"):
        # SQLite 不支持连接池参数；NullPool 避免连接跨事件循环复用
        return create_async_engine(url, echo=settings.DB_ECHO, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True  # 自动检测断连并重连 (MySQL 8小时断开问题)
    )

# 3. 创建会话工厂
@lru_cache()
def get_sessionmaker():
    return sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False
    )

def reset_engine():
    """丢弃缓存的引擎和会话工厂，下次访问时按当前配置重建"""
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()

# 4. 依赖注入函数
async def get_db():
    async with get_sessionmaker()() as session:
        try:
            yield session
        finally:
            await session.close()
