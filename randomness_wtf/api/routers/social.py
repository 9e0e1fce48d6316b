"""
推文互动抽奖路由
"""
import asyncio
import logging

from fastapi import APIRouter, Depends

from randomness_wtf.api.deps import OracleFactory, get_interaction_source, get_oracle_factory
from randomness_wtf.config import Config
from randomness_wtf.errors import ValidationError
from randomness_wtf.models.social import SocialInteractionsRequest, WinnersRequest
from randomness_wtf.services.aggregator import InteractionSource, aggregate_interactions
from randomness_wtf.services.apify import parse_tweet_url
from randomness_wtf.services.winner_selector import select_winners

logger = logging.getLogger(__name__)

social_router = APIRouter(prefix="/api/social-interactions", tags=["Social"])


@social_router.post("")
async def social_interactions(
    req: SocialInteractionsRequest,
    source: InteractionSource = Depends(get_interaction_source),
):
    """
    获取符合条件的推文互动用户

    多个条件同时选择时取交集；推文作者不会出现在结果中。
    """
    if not req.tweet_url or not req.tweet_url.strip():
        raise ValidationError("Tweet URL is required")
    if req.criteria is None:
        raise ValidationError("Criteria object is required")
    if not req.criteria.selected():
        raise ValidationError("Select at least one criteria")

    tweet_url = req.tweet_url.strip()
    parse_tweet_url(tweet_url)

    demo_mode = Config.DEMO_MODE if req.demo_mode is None else req.demo_mode
    logger.info(f"[Social] {tweet_url} criteria={req.criteria.selected()} demo={demo_mode}")

    result = await aggregate_interactions(source, tweet_url, req.criteria, demo_mode=demo_mode)
    return {"success": True, **result.model_dump(by_alias=True)}


@social_router.post("/winners")
async def social_winners(
    req: WinnersRequest,
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """从用户池中抽取中奖者 (不放回)"""
    oracle = oracle_factory(req.provider)
    winners = await asyncio.to_thread(select_winners, req.users, req.count, oracle)
    logger.info(f"[Social] 中奖者: {[w.username for w in winners]}")
    return {
        "success": True,
        "winners": [winner.model_dump() for winner in winners],
        "handles": [winner.username for winner in winners],
        "provider": oracle.provider.id,
    }
