"""
数据库引擎与会话管理
Engine and session factories backing the user, conversation, check-in and
reflection stores.
"""
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator, Optional
from pathlib import Path
import logging

from eunoia.config.settings import settings
from .models import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """根据数据库URL创建引擎（SQLite需要额外的连接参数）"""
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # FastAPI在线程池中解析依赖，会话可能跨线程使用
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args=connect_args,
    )


# 创建数据库引擎
engine = build_engine(settings.database_url)

# 创建会话工厂
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind: Optional[Engine] = None):
    """创建所有表"""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")
        raise


def get_db() -> Generator[Session, None, None]:
    """FastAPI依赖：每个请求一个会话，请求结束时关闭"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class DatabaseManager:
    """脚本与健康检查使用的独立会话工厂"""

    def __init__(self, bind: Optional[Engine] = None):
        self.engine = bind or engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_session(self) -> Session:
        """调用方负责关闭（可用作上下文管理器）"""
        return self.SessionLocal()

    def health_check(self) -> bool:
        """数据库健康检查"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
