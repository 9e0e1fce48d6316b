from pydantic import BaseModel, Field
from typing import Optional, List

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class GameRecord(BaseModel):
    """Pack Battles 合约中的一局对战"""
    id: int
    creator: str
    player: str = ZERO_ADDRESS
    is_active: bool = False
    is_completed: bool = False
    available_nfts: List[int] = Field(default_factory=list)
    creator_nft_index: int = 0
    player_nft_index: int = 0

    @property
    def has_opponent(self) -> bool:
        return bool(self.player) and self.player.lower() != ZERO_ADDRESS


class BattleWinner(BaseModel):
    address: str
    token_index: int


class RevealPhase(BaseModel):
    """前端动画阶段及持续时间 (毫秒)"""
    phase: str
    duration_ms: int = 0


class PackInfo(BaseModel):
    available_nfts: int
    pack_cost_wei: int
    pack_cost: str


class TxRequest(BaseModel):
    sender: str
