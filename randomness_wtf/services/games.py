"""
Pack Battles / Pack Opening 合约

只读查询在这里完成；createGame / joinGame 只构建未签名交易，
由前端钱包签名并广播。
"""
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from web3 import Web3

from randomness_wtf.config import Config
from randomness_wtf.errors import ConfigurationError, ValidationError, as_upstream_error
from randomness_wtf.models.game import BattleWinner, GameRecord, PackInfo, RevealPhase

logger = logging.getLogger(__name__)

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")

# 动画阶段时长 (毫秒)
REVEAL_MS = 2000
BATTLE_MS = 3000

PACK_BATTLES_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "createGame",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "gameId", "type": "uint256"}],
        "name": "joinGame",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "gameId", "type": "uint256"}],
        "name": "getGame",
        "outputs": [
            {
                "components": [
                    {"internalType": "address", "name": "creator", "type": "address"},
                    {"internalType": "address", "name": "player", "type": "address"},
                    {"internalType": "bool", "name": "isActive", "type": "bool"},
                    {"internalType": "bool", "name": "isCompleted", "type": "bool"},
                    {"internalType": "uint256[]", "name": "availableNFTs", "type": "uint256[]"},
                    {"internalType": "uint256", "name": "creatorNFTIndex", "type": "uint256"},
                    {"internalType": "uint256", "name": "playerNFTIndex", "type": "uint256"},
                ],
                "internalType": "struct PackBattles.Game",
                "name": "",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "gameCounter",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "GAME_FEE",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

PACK_OPENING_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "getAvailableNFTCount",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "PACK_COST",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def is_valid_address(address: str) -> bool:
    return bool(ADDRESS_PATTERN.match(address or ""))


def shorten_address(address: str, start_chars: int = 6, end_chars: int = 4) -> str:
    """0x1234...abcd"""
    if not address:
        return ""
    if len(address) <= start_chars + end_chars:
        return address
    return f"{address[:start_chars]}...{address[-end_chars:]}"


def battle_winner(game: GameRecord) -> Optional[BattleWinner]:
    """NFT 序号较大的一方获胜；相等时算对手 (player) 赢"""
    if not game.is_completed:
        return None
    if game.creator_nft_index > game.player_nft_index:
        return BattleWinner(address=game.creator, token_index=game.creator_nft_index)
    return BattleWinner(address=game.player, token_index=game.player_nft_index)


def reveal_phases(game: GameRecord) -> List[RevealPhase]:
    if game.is_completed:
        return [
            RevealPhase(phase="reveal", duration_ms=REVEAL_MS),
            RevealPhase(phase="battle", duration_ms=BATTLE_MS),
            RevealPhase(phase="result"),
        ]
    if game.is_active and not game.has_opponent:
        return [RevealPhase(phase="waiting")]
    return [RevealPhase(phase="pending")]


def game_from_tuple(game_id: int, data) -> GameRecord:
    creator, player, is_active, is_completed, available, creator_index, player_index = data
    return GameRecord(
        id=game_id,
        creator=creator,
        player=player,
        is_active=bool(is_active),
        is_completed=bool(is_completed),
        available_nfts=[int(token) for token in available],
        creator_nft_index=int(creator_index),
        player_nft_index=int(player_index),
    )


def _connect(address: Optional[str], abi: List[Dict[str, Any]], name: str):
    if not address:
        raise ConfigurationError(f"{name} contract address not configured")
    w3 = Web3(Web3.HTTPProvider(Config.GAMES_RPC_URL, request_kwargs={"timeout": Config.RPC_TIMEOUT}))
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)


def connect_pack_battles():
    return _connect(Config.PACK_BATTLES_ADDRESS, PACK_BATTLES_ABI, "Pack Battles")


def connect_pack_opening():
    return _connect(Config.PACK_OPENING_ADDRESS, PACK_OPENING_ABI, "Pack Opening")


class GamesClient:
    """Pack Battles / Pack Opening 合约客户端"""

    def __init__(
        self,
        battles_factory: Optional[Callable[[], Any]] = None,
        opening_factory: Optional[Callable[[], Any]] = None,
        chain_id: Optional[int] = None,
    ):
        self._battles_factory = battles_factory or connect_pack_battles
        self._opening_factory = opening_factory or connect_pack_opening
        self.chain_id = chain_id if chain_id is not None else Config.GAMES_CHAIN_ID
        self._battles = None
        self._opening = None

    @property
    def battles(self):
        if self._battles is None:
            self._battles = self._battles_factory()
        return self._battles

    @property
    def opening(self):
        if self._opening is None:
            self._opening = self._opening_factory()
        return self._opening

    def _call(self, source: str, fn):
        try:
            return fn()
        except Exception as e:
            logger.error(f"[Games] {source} 调用失败: {e}")
            raise as_upstream_error(e, source) from e

    def game_counter(self) -> int:
        return int(self._call("Pack Battles", lambda: self.battles.functions.gameCounter().call()))

    def game_fee(self) -> int:
        return int(self._call("Pack Battles", lambda: self.battles.functions.GAME_FEE().call()))

    def get_game(self, game_id: int) -> GameRecord:
        if game_id < 1:
            raise ValidationError("Game id must be a positive integer")
        data = self._call("Pack Battles", lambda: self.battles.functions.getGame(game_id).call())
        return game_from_tuple(game_id, data)

    def list_games(self) -> List[GameRecord]:
        """按 id 1..gameCounter 顺序读取所有对战"""
        counter = self.game_counter()
        logger.info(f"[Games] gameCounter = {counter}")
        return [self.get_game(game_id) for game_id in range(1, counter + 1)]

    def _tx_params(self, sender: str) -> Dict[str, Any]:
        if not is_valid_address(sender):
            raise ValidationError("Invalid sender address")
        return {
            "from": Web3.to_checksum_address(sender),
            "value": self.game_fee(),
            "chainId": self.chain_id,
        }

    def build_create_game_tx(self, sender: str) -> Dict[str, Any]:
        """构建 createGame 未签名交易 (附带 GAME_FEE)"""
        params = self._tx_params(sender)
        return self._call(
            "Pack Battles",
            lambda: dict(self.battles.functions.createGame().build_transaction(params)),
        )

    def build_join_game_tx(self, game_id: int, sender: str) -> Dict[str, Any]:
        """构建 joinGame 未签名交易；只能加入尚无对手的进行中对战"""
        game = self.get_game(game_id)
        if not game.is_active or game.is_completed:
            raise ValidationError(f"Game {game_id} is not open")
        if game.has_opponent:
            raise ValidationError(f"Game {game_id} already has a player")
        if game.creator.lower() == (sender or "").lower():
            raise ValidationError("Cannot join your own game")
        params = self._tx_params(sender)
        return self._call(
            "Pack Battles",
            lambda: dict(self.battles.functions.joinGame(game_id).build_transaction(params)),
        )

    def available_nft_count(self) -> int:
        return int(self._call("Pack Opening", lambda: self.opening.functions.getAvailableNFTCount().call()))

    def pack_cost(self) -> int:
        return int(self._call("Pack Opening", lambda: self.opening.functions.PACK_COST().call()))

    def pack_info(self) -> PackInfo:
        cost = self.pack_cost()
        return PackInfo(
            available_nfts=self.available_nft_count(),
            pack_cost_wei=cost,
            pack_cost=str(Web3.from_wei(cost, "ether")),
        )
