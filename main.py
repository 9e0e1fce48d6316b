"""
RandomnessWTF - 链上随机数演示服务

主入口：随机数、列表/文件随机选择、推文互动抽奖、Pack Battles
"""
import logging
import uvicorn
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from randomness_wtf.utils.logger import setup_logging

# 加载环境变量 (必须在日志配置前加载，以便读取 LOG_LEVEL_*)
load_dotenv()

# 配置日志
setup_logging()
startup_logger = logging.getLogger("randomness_wtf.startup")

from randomness_wtf import __version__
from randomness_wtf.config import Config
from randomness_wtf.errors import ConfigurationError
from randomness_wtf.services.providers import get_provider

APP_TITLE = "RandomnessWTF - On-chain Randomness"


# 1. 定义 lifespan 函数
@asynccontextmanager
async def lifespan(app):
    """应用生命周期管理"""
    await startup_event()
    yield


async def startup_event():
    """启动时检查配置"""
    # 缺少 Apify token 不阻止启动，/api/social-interactions 会返回 500
    try:
        Config.validate()
        startup_logger.info("Apify token configured.")
    except ConfigurationError as e:
        startup_logger.warning(f"{e.message} (/api/social-interactions 将不可用)")

    provider = get_provider()
    startup_logger.info(f"Default VRF provider: {provider.name} ({provider.chain_name})")
    if Config.DEMO_MODE:
        startup_logger.warning("DEMO_MODE 已开启: 没有符合条件的用户时会生成占位用户")

    startup_logger.info(f"API 文档: http://localhost:{Config.PORT}/scalar")
    startup_logger.info(f"OpenAPI JSON: http://localhost:{Config.PORT}/openapi.json")


# 2. 创建 FastAPI 应用
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

app = FastAPI(
    title=APP_TITLE,
    description="Verifiable on-chain randomness: numbers, list picks, tweet giveaways and pack battles",
    version=__version__,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs(request: Request):
    return get_scalar_api_reference(
        openapi_url=str(request.url_for("openapi")),
        title=APP_TITLE,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. 错误处理
from randomness_wtf.api.errors import install_error_handlers

install_error_handlers(app)

# 4. 注册路由
from randomness_wtf.api.routers import (
    social_router,
    random_router,
    providers_router,
    games_router,
    packs_router,
    staking_router,
)

app.include_router(social_router)
app.include_router(random_router)
app.include_router(providers_router)
app.include_router(games_router)
app.include_router(packs_router)
app.include_router(staking_router)


@app.get("/")
async def root():
    """根路径"""
    return {"message": "RandomnessWTF is running", "version": __version__}


if __name__ == "__main__":
    uvicorn.run("main:app", host=Config.HOST, port=Config.PORT, reload=True)
