"""
中奖者抽取

通过 oracle 逐个不放回抽取：每次抽中一个后从候选池移除，再抽下一个。
每次调用依赖上一次的结果，因此只能顺序执行。
"""
import logging
from typing import List, Protocol

from randomness_wtf.errors import EmptyInputError, UpstreamError, ValidationError
from randomness_wtf.models.social import Participant

logger = logging.getLogger(__name__)


class RandomItemOracle(Protocol):
    def select_random_item(self, items: List[str]) -> str:
        ...


def draw_items(items: List[str], count: int, oracle: RandomItemOracle) -> List[str]:
    """
    从 items 中不放回地抽取 count 个

    count 会被截断为 len(items)。oracle 出错时中止，已抽出的结果一并丢弃。
    """
    if count < 1:
        raise ValidationError("Number of winners must be at least 1")
    if not items:
        raise EmptyInputError("Cannot select winners from an empty pool")

    remaining = list(items)
    target = min(count, len(remaining))
    drawn: List[str] = []

    while len(drawn) < target:
        if len(remaining) == 1:
            drawn.append(remaining.pop())
            continue

        picked = oracle.select_random_item(list(remaining))
        try:
            remaining.remove(picked)
        except ValueError:
            raise UpstreamError(f"Oracle returned an item outside the pool: {picked!r}")
        drawn.append(picked)
        logger.debug(f"[Winners] 第 {len(drawn)}/{target} 个: {picked}")

    return drawn


def select_winners(pool: List[Participant], count: int, oracle: RandomItemOracle) -> List[Participant]:
    """
    从参与者池中抽取 count 个不重复的中奖者

    池中只有一人时直接返回，不调用 oracle。以参与者 id 作为抽取项。
    """
    if not pool:
        raise EmptyInputError("Cannot select winners from an empty pool")

    by_id = {}
    for participant in pool:
        by_id[participant.id] = participant

    logger.info(f"[Winners] 从 {len(by_id)} 人中抽取 {min(count, len(by_id))} 人")
    winner_ids = draw_items(list(by_id), count, oracle)
    return [by_id[winner_id] for winner_id in winner_ids]
