"""
Pack Battles / Pack Opening 路由
"""
import asyncio
import logging

from fastapi import APIRouter, Depends

from randomness_wtf.api.deps import get_games_client
from randomness_wtf.models.game import TxRequest
from randomness_wtf.services.games import GamesClient, battle_winner, reveal_phases

logger = logging.getLogger(__name__)

games_router = APIRouter(prefix="/api/games", tags=["Pack Battles"])
packs_router = APIRouter(prefix="/api/packs", tags=["Pack Opening"])


def _game_view(game):
    winner = battle_winner(game)
    return {
        **game.model_dump(),
        "has_opponent": game.has_opponent,
        "winner": winner.model_dump() if winner else None,
    }


@games_router.get("")
async def list_games(client: GamesClient = Depends(get_games_client)):
    """列出所有对战"""
    games = await asyncio.to_thread(client.list_games)
    fee = await asyncio.to_thread(client.game_fee)
    return {"success": True, "games": [_game_view(game) for game in games], "fee": fee}


@games_router.post("/create-tx")
async def create_game_tx(req: TxRequest, client: GamesClient = Depends(get_games_client)):
    """构建 createGame 交易，由钱包签名"""
    tx = await asyncio.to_thread(client.build_create_game_tx, req.sender)
    return {"success": True, "tx": tx}


@games_router.get("/{game_id}")
async def get_game(game_id: int, client: GamesClient = Depends(get_games_client)):
    """对战详情，包括胜者和前端动画阶段"""
    game = await asyncio.to_thread(client.get_game, game_id)
    view = _game_view(game)
    return {
        "success": True,
        "game": view,
        "winner": view["winner"],
        "phases": [phase.model_dump() for phase in reveal_phases(game)],
    }


@games_router.post("/{game_id}/join-tx")
async def join_game_tx(game_id: int, req: TxRequest, client: GamesClient = Depends(get_games_client)):
    """构建 joinGame 交易，由钱包签名"""
    tx = await asyncio.to_thread(client.build_join_game_tx, game_id, req.sender)
    return {"success": True, "tx": tx}


@packs_router.get("")
async def pack_info(client: GamesClient = Depends(get_games_client)):
    info = await asyncio.to_thread(client.pack_info)
    return {"success": True, "pack": info.model_dump()}
