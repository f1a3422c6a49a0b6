"""
FastAPI Main Application - A2A Gateway
包含A2A协议端点、健康检查与Agent Card发现
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime, timezone
import logging

from eunoia.config.settings import settings
from eunoia.config.agent_card_manager import get_agent_card_manager
from eunoia.data_persistence import create_tables
from .a2a_handler import router as a2a_router
from .wellbeing_api import router as wellbeing_router

# 配置日志
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# 创建FastAPI应用
app = FastAPI(
    title=settings.app_name,
    description="Eunoia mental wellbeing companion - A2A protocol gateway",
    version=settings.app_version
)

# CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(a2a_router)
app.include_router(wellbeing_router)


@app.on_event("startup")
async def startup_event():
    """应用启动时的初始化"""
    logger.info("Starting Eunoia Agent Service...")
    try:
        create_tables()
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
    logger.info("Eunoia Agent Service started successfully")


@app.get("/")
async def root():
    """根端点"""
    return {
        "message": "Eunoia Agent Service is running",
        "version": settings.app_version,
        "status": "running",
        "a2a_endpoint": settings.a2a_endpoint_path,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/agent/health")
async def health_check():
    """健康检查端点 - 固定返回200"""
    return {
        "status": "healthy",
        "agent": settings.agent_name,
        "service": "mental wellbeing assistant"
    }


@app.get("/.well-known/agent-card.json")
async def get_agent_card(request: Request):
    """返回此Agent的A2A Agent Card (标准A2A发现端点)"""
    base_url = str(request.base_url).rstrip('/')
    return get_agent_card_manager().get_agent_card(base_url, settings.a2a_endpoint_path)
