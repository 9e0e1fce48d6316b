"""
共享配置 (从环境变量 / .env 读取)
"""
import os
from dotenv import load_dotenv

from randomness_wtf.errors import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Apify Twitter Scraper
    APIFY_API_TOKEN = os.getenv("APIFY_API_TOKEN")
    APIFY_ACTOR = os.getenv("APIFY_ACTOR", "apidojo~twitter-scraper-lite")
    APIFY_BASE_URL = os.getenv("APIFY_BASE_URL", "https://api.apify.com/v2")
    APIFY_TIMEOUT = float(os.getenv("APIFY_TIMEOUT", "120"))
    FOLLOWERS_MAX_ITEMS = int(os.getenv("FOLLOWERS_MAX_ITEMS", "200"))
    INTERACTIONS_MAX_ITEMS = int(os.getenv("INTERACTIONS_MAX_ITEMS", "100"))

    # 没有真实参与者时是否允许生成演示用户（默认关闭）
    DEMO_MODE = _env_bool("DEMO_MODE", False)

    # 链上随机数
    DEFAULT_VRF_PROVIDER = os.getenv("DEFAULT_VRF_PROVIDER", "flow")
    RPC_TIMEOUT = float(os.getenv("RPC_TIMEOUT", "15"))

    # Pack Battles / Pack Opening
    PACK_BATTLES_ADDRESS = os.getenv("PACK_BATTLES_ADDRESS", "0x9b4568cE546c1c54f15720783FE1744C20fF1914")
    PACK_OPENING_ADDRESS = os.getenv("PACK_OPENING_ADDRESS")
    GAMES_RPC_URL = os.getenv("GAMES_RPC_URL", "https://testnet.evm.nodes.onflow.org")
    GAMES_CHAIN_ID = int(os.getenv("GAMES_CHAIN_ID", "545"))

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))

    @classmethod
    def require_apify_token(cls) -> str:
        if not cls.APIFY_API_TOKEN:
            raise ConfigurationError(
                "Apify API token not configured. Please add APIFY_API_TOKEN to your environment variables."
            )
        return cls.APIFY_API_TOKEN

    @classmethod
    def validate(cls):
        missing = []
        if not cls.APIFY_API_TOKEN:
            missing.append("APIFY_API_TOKEN")

        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
