from typing import Callable, Optional

from randomness_wtf.services.aggregator import InteractionSource
from randomness_wtf.services.apify import ApifyClient
from randomness_wtf.services.games import GamesClient
from randomness_wtf.services.randomness import RandomnessClient

OracleFactory = Callable[[Optional[str]], RandomnessClient]


def get_interaction_source() -> InteractionSource:
    """缺少 APIFY_API_TOKEN 时抛出 ConfigurationError (500)"""
    return ApifyClient.from_config()


def get_oracle_factory() -> OracleFactory:
    """按请求中的 provider id 创建客户端，不共享全局的当前 provider"""
    return RandomnessClient.for_provider_id


def get_games_client() -> GamesClient:
    return GamesClient()
