"""
业务服务模块
"""

from .providers import VRFProvider, VRF_PROVIDERS, get_provider, list_providers
from .randomness import RandomnessClient, connect_contract
from .winner_selector import draw_items, select_winners
from .aggregator import aggregate_interactions, dedupe_participants, resolve_eligible_pool
from .apify import ApifyClient, parse_tweet_url
from .file_parser import parse_file_to_rows, split_list_input
from .games import GamesClient, battle_winner, reveal_phases
from .staking import estimate_rewards

__all__ = [
    "VRFProvider",
    "VRF_PROVIDERS",
    "get_provider",
    "list_providers",
    "RandomnessClient",
    "connect_contract",
    "draw_items",
    "select_winners",
    "aggregate_interactions",
    "dedupe_participants",
    "resolve_eligible_pool",
    "ApifyClient",
    "parse_tweet_url",
    "parse_file_to_rows",
    "split_list_input",
    "GamesClient",
    "battle_winner",
    "reveal_phases",
    "estimate_rewards",
]
