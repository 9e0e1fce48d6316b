"""
API 路由分组模块
"""

from .social import social_router
from .random import random_router
from .providers import providers_router
from .games import games_router, packs_router
from .staking import staking_router

__all__ = [
    "social_router",
    "random_router",
    "providers_router",
    "games_router",
    "packs_router",
    "staking_router",
]
