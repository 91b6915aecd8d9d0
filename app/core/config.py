# app/core/config.py
from typing import List, Optional
from functools import lru_cache
from urllib.parse import quote_plus  # 处理密码里的特殊字符
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
load_dotenv()
class Settings(BaseSettings):
    # --- 1. 数据库原子配置 (从 .env 读取) ---
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = ""
    MYSQL_HOST: str = "localhost"
    MYSQL_PORT: int = 3306
    MYSQL_DB: str = "feedback_db"

    # 完整连接串，设置后覆盖上面的原子配置 (测试时用 sqlite+aiosqlite)
    DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = False

    # --- 2. 业务配置 ---
    MAX_CREDITS: int = 5
    HISTORY_LIMIT: int = 5

    # --- 3. 服务配置 ---
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # --- 4. 动态生成数据库 URL ---
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        """
        优先使用 DATABASE_URL；否则把原子配置拼装成 aiomysql 连接串，
        密码自动做 URL 编码。
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if not self.MYSQL_PASSWORD:
            raise ValueError("❌ 错误: 环境变量 MYSQL_PASSWORD 未设置！")

        encoded_password = quote_plus(self.MYSQL_PASSWORD)

        return (
            f"mysql+aiomysql://"
            f"{self.MYSQL_USER}:{encoded_password}@"
            f"{self.MYSQL_HOST}:{self.MYSQL_PORT}/"
            f"{self.MYSQL_DB}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        # 忽略 .env 中多余的变量
        extra = "ignore"

@lru_cache()
def get_settings():
    return Settings()
