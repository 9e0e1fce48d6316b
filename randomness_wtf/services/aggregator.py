"""
推文互动聚合

根据筛选条件计算有资格参与抽奖的用户:
- 单个条件: 该条件对应的列表 (按 id 去重)
- 多个条件: 各列表按 id 取交集 (AND)
- 推文作者永远被排除
- 演示模式下，若结果为空则按推文转推/点赞数生成占位用户 (每类最多 10 个)
"""
import logging
import random
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from randomness_wtf.errors import ValidationError
from randomness_wtf.models.social import (
    AggregationResult,
    InteractionCounts,
    InteractionCriteria,
    Participant,
    TweetInfo,
)
from randomness_wtf.utils.aio import gather_or_cancel

logger = logging.getLogger(__name__)

DEMO_CAP_PER_CATEGORY = 10

_FIRST_NAMES = ["Alex", "Sam", "Jordan", "Taylor", "Casey", "Riley", "Jamie", "Morgan", "Quinn"]
_HANDLE_PARTS = ["crypto", "nft", "web3", "defi", "eth", "btc", "trader", "hodl", "moon"]


class InteractionSource(Protocol):
    """Apify 客户端需要提供的接口"""

    async def fetch_tweet(self, tweet_url: str) -> TweetInfo:
        ...

    async def fetch_followers(self, handle: str) -> List[Participant]:
        ...

    async def fetch_retweeters(self, tweet_url: str) -> List[Participant]:
        ...

    async def fetch_likers(self, tweet_url: str) -> List[Participant]:
        ...


def dedupe_participants(participants: Iterable[Participant]) -> List[Participant]:
    """按 id 去重；保留首次出现的顺序，显示字段以最后一次为准"""
    merged: Dict[str, Participant] = {}
    for participant in participants:
        merged[participant.id] = participant
    return list(merged.values())


def resolve_eligible_pool(
    lists: Mapping[str, List[Participant]],
    criteria: InteractionCriteria,
    author_id: Optional[str],
) -> List[Participant]:
    """
    计算符合条件的用户池

    Args:
        lists: 条件名 (follows / retweets / shares) -> 原始用户列表
        criteria: 选择的条件
        author_id: 推文作者 id，会被排除

    Raises:
        ValidationError: 没有选择任何条件
    """
    selected = criteria.selected()
    if not selected:
        raise ValidationError("Select at least one criteria")

    if len(selected) == 1:
        pool = dedupe_participants(lists.get(selected[0], []))
    else:
        tally: Dict[str, int] = {}
        latest: Dict[str, Participant] = {}
        for name in selected:
            for participant in dedupe_participants(lists.get(name, [])):
                tally[participant.id] = tally.get(participant.id, 0) + 1
                latest[participant.id] = participant
        pool = [latest[pid] for pid, count in tally.items() if count == len(selected)]

    if author_id:
        pool = [participant for participant in pool if participant.id != author_id]
    return pool


def _demo_handle(rng: random.Random) -> str:
    first = rng.choice(_HANDLE_PARTS)
    second = rng.choice(_HANDLE_PARTS) if rng.random() > 0.5 else ""
    return f"@{first}{second}{rng.randrange(1000)}"


def synthesize_demo_participants(
    retweet_count: int,
    like_count: int,
    rng: Optional[random.Random] = None,
) -> List[Participant]:
    """
    生成演示用占位用户，数量取自推文公开的转推/点赞数，每类最多 10 个
    """
    rng = rng or random.Random()
    users: List[Participant] = []
    for prefix, count in (("demo_rt", retweet_count), ("demo_like", like_count)):
        for i in range(1, min(max(count, 0), DEMO_CAP_PER_CATEGORY) + 1):
            users.append(Participant(
                id=f"{prefix}_{i}",
                username=_demo_handle(rng),
                name=f"{rng.choice(_FIRST_NAMES)} {rng.choice(_FIRST_NAMES)}",
                demo=True,
            ))
    return users


async def aggregate_interactions(
    source: InteractionSource,
    tweet_url: str,
    criteria: InteractionCriteria,
    demo_mode: bool = False,
) -> AggregationResult:
    """
    拉取所需的互动列表并计算用户池

    只拉取已选择条件对应的列表，各列表并发获取；任一列表失败则取消其余请求并整体失败。
    """
    selected = criteria.selected()
    if not selected:
        raise ValidationError("Select at least one criteria")

    tweet = await source.fetch_tweet(tweet_url)
    logger.info(f"[Social] 推文 {tweet.id} by {tweet.author.username}, 条件: {', '.join(selected)}")

    fetchers = {
        "follows": lambda: source.fetch_followers(tweet.author.username),
        "retweets": lambda: source.fetch_retweeters(tweet_url),
        "shares": lambda: source.fetch_likers(tweet_url),
    }
    results = await gather_or_cancel(*(fetchers[name]() for name in selected))
    lists = {name: dedupe_participants(users) for name, users in zip(selected, results)}

    for name, users in lists.items():
        logger.info(f"[Social] {name}: {len(users)} 人")

    pool = resolve_eligible_pool(lists, criteria, tweet.author.id)
    demo = False
    if not pool and demo_mode:
        pool = synthesize_demo_participants(tweet.stats.retweets, tweet.stats.likes)
        demo = bool(pool)
        logger.warning(f"[Social] 没有符合条件的用户，演示模式生成 {len(pool)} 个占位用户")

    logger.info(f"[Social] 符合条件的用户 (AND): {len(pool)}")

    counts = InteractionCounts(
        follows=len(lists.get("follows", [])),
        retweets=len(lists.get("retweets", [])),
        shares=len(lists.get("shares", [])),
        total=len(pool),
    )
    return AggregationResult(users=pool, tweet_info=tweet, counts=counts, demo=demo)
