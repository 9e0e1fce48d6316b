import logging
import os
import sys
from typing import Dict, List, Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

OFF_VALUES = ("OFF", "DISABLE", "FALSE", "NO", "0", "NONE")

# Logger 前缀 -> LOG_LEVEL_<别名>
LOGGER_ALIASES: Dict[str, str] = {
    "randomness_wtf.services.apify": "APIFY",
    "randomness_wtf.services.randomness": "ORACLE",
    "randomness_wtf.services.winner_selector": "WINNERS",
    "randomness_wtf.services.aggregator": "SOCIAL",
    "randomness_wtf.services.games": "GAMES",
    "randomness_wtf.services.file_parser": "PARSER",
    "randomness_wtf.api": "API",
    "randomness_wtf.startup": "STARTUP",
    "uvicorn": "UVICORN",
    "uvicorn.access": "ACCESS",
    "httpx": "HTTPX",
    "web3": "WEB3",
}

# 未设置环境变量时的默认级别
# httpx 在 INFO 级别会输出完整请求 URL
DEFAULT_LEVELS: Dict[str, str] = {
    "STARTUP": "INFO",
    "HTTPX": "WARNING",
    "WEB3": "WARNING",
}


def _resolve_level(value: str) -> Optional[int]:
    """OFF 类取值返回高于 CRITICAL 的级别；无效取值返回 None"""
    value = value.upper()
    if value in OFF_VALUES:
        return logging.CRITICAL + 1
    level = getattr(logging, value, None)
    return level if isinstance(level, int) else None


def setup_logging():
    """
    配置根 Logger 以及各模块的日志级别

    LOG_LEVEL 控制全局级别 (默认 INFO)，LOG_LEVEL_<别名> 单独覆盖某个模块，
    别名见 LOGGER_ALIASES。取值 OFF 关闭该模块日志。
    """
    global_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, global_level_str, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    overrides: List[str] = []
    for prefix, alias in LOGGER_ALIASES.items():
        env_var_name = f"LOG_LEVEL_{alias}"
        value = os.getenv(env_var_name) or DEFAULT_LEVELS.get(alias)
        if not value:
            continue

        level = _resolve_level(value)
        if level is None:
            logging.warning(f"环境变量 {env_var_name} 的值 '{value}' 无效，已忽略。")
            continue
        logging.getLogger(prefix).setLevel(level)
        overrides.append(f"{alias}: {'OFF' if level > logging.CRITICAL else value.upper()}")

    logging.info(f"Log System Initialized. Global Level: {global_level_str}")
    if overrides:
        logging.info(f"Module Overrides: {', '.join(overrides)}")
