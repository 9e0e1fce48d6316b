"""
链上随机数客户端

封装 VRF 合约的两个只读方法:
- getRandomNumber(min, max)
- selectRandomItem(items)

客户端绑定到一个 VRFProvider；切换 provider 时丢弃缓存的连接，
下一次调用时再重新连接。
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

from web3 import Web3

from randomness_wtf.config import Config
from randomness_wtf.errors import (
    EmptyListError,
    InvalidRangeError,
    ValidationError,
    as_upstream_error,
)
from randomness_wtf.services.providers import VRFProvider, get_provider

logger = logging.getLogger(__name__)

ContractFactory = Callable[[VRFProvider], Any]

YOLO_MIN = 1
YOLO_MAX = 100


def connect_contract(provider: VRFProvider):
    """创建只读的 web3 合约对象"""
    w3 = Web3(Web3.HTTPProvider(provider.rpc_url, request_kwargs={"timeout": Config.RPC_TIMEOUT}))
    logger.info(f"[Oracle] 已连接 {provider.name} ({provider.chain_name})")
    return w3.eth.contract(
        address=Web3.to_checksum_address(provider.contract_address),
        abi=provider.abi,
    )


class RandomnessClient:
    """VRF 合约客户端"""

    def __init__(self, provider: VRFProvider, contract_factory: Optional[ContractFactory] = None):
        self.provider = provider
        self._contract_factory = contract_factory or connect_contract
        self._contract = None

    @classmethod
    def for_provider_id(cls, provider_id: Optional[str] = None,
                        contract_factory: Optional[ContractFactory] = None) -> "RandomnessClient":
        return cls(get_provider(provider_id), contract_factory=contract_factory)

    @property
    def is_connected(self) -> bool:
        return self._contract is not None

    @property
    def contract(self):
        if self._contract is None:
            try:
                self._contract = self._contract_factory(self.provider)
            except Exception as e:
                logger.error(f"[Oracle] 初始化 {self.provider.name} 失败: {e}")
                raise as_upstream_error(e, self.provider.name) from e
        return self._contract

    def switch_provider(self, provider: VRFProvider):
        """切换到另一个 provider，缓存的连接随之失效"""
        if provider.id == self.provider.id:
            return
        logger.info(f"[Oracle] 切换 provider: {self.provider.id} -> {provider.id}")
        self.provider = provider
        self._contract = None

    def random_in_range(self, min_value: int, max_value: int) -> int:
        """
        获取 [min, max] 区间内的随机整数

        Raises:
            InvalidRangeError: min 不小于 max，或为负数
        """
        min_value = int(min_value)
        max_value = int(max_value)
        if min_value < 0 or max_value < 0:
            raise InvalidRangeError("Range bounds must be non-negative")
        if min_value >= max_value:
            raise InvalidRangeError("Max must be greater than min")

        logger.info(f"[Oracle] getRandomNumber({min_value}, {max_value}) via {self.provider.id}")
        try:
            result = self.contract.functions.getRandomNumber(min_value, max_value).call()
        except Exception as e:
            logger.error(f"[Oracle] getRandomNumber 调用失败: {e}")
            raise as_upstream_error(e, self.provider.name) from e
        return int(result)

    def random_pick(self, items: List[str]) -> str:
        """
        从字符串列表中随机选出一项

        只有一项时直接返回 (合约不接受单元素列表)。

        Raises:
            EmptyListError: 列表为空
        """
        if not items:
            raise EmptyListError("Cannot select from an empty list of items")
        if any(not isinstance(item, str) for item in items):
            raise ValidationError("All items must be strings")
        if len(items) == 1:
            return items[0]

        logger.info(f"[Oracle] selectRandomItem({len(items)} items) via {self.provider.id}")
        try:
            result = self.contract.functions.selectRandomItem(list(items)).call()
        except Exception as e:
            logger.error(f"[Oracle] selectRandomItem 调用失败: {e}")
            raise as_upstream_error(e, self.provider.name) from e
        return str(result)

    # WinnerSelector 使用的 oracle 接口
    select_random_item = random_pick

    def roll_yolo(self) -> Tuple[int, str]:
        """掷骰子: 1..100，大于 50 为 YOLO!"""
        number = self.random_in_range(YOLO_MIN, YOLO_MAX)
        return number, ("YOLO!" if number > 50 else "NO WAY!")
