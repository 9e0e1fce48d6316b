"""
随机数 / 随机选择路由
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from randomness_wtf.api.deps import OracleFactory, get_oracle_factory
from randomness_wtf.errors import EmptyListError
from randomness_wtf.models.random import DrawItemsRequest, RandomItemRequest, RandomNumberRequest
from randomness_wtf.services.file_parser import parse_file_to_rows, split_list_input
from randomness_wtf.services.winner_selector import draw_items

logger = logging.getLogger(__name__)

random_router = APIRouter(prefix="/api/random", tags=["Random"])


@random_router.post("/number")
async def random_number(
    req: RandomNumberRequest,
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """生成 [min, max] 区间内的随机数"""
    oracle = oracle_factory(req.provider)
    number = await asyncio.to_thread(oracle.random_in_range, req.min, req.max)
    return {"success": True, "number": number, "provider": oracle.provider.id}


@random_router.post("/item")
async def random_item(
    req: RandomItemRequest,
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """从列表 (或多行文本) 中随机选择一项"""
    items = list(req.items or [])
    if req.text:
        items.extend(split_list_input(req.text))
    items = [item.strip() for item in items if item and item.strip()]
    if not items:
        raise EmptyListError("Please enter at least one item")

    oracle = oracle_factory(req.provider)
    item = await asyncio.to_thread(oracle.random_pick, items)
    return {"success": True, "item": item, "provider": oracle.provider.id}


@random_router.post("/items/draw")
async def draw_random_items(
    req: DrawItemsRequest,
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """不放回地抽取多项"""
    oracle = oracle_factory(req.provider)
    items = await asyncio.to_thread(draw_items, req.items, req.count, oracle)
    return {"success": True, "items": items, "provider": oracle.provider.id}


@random_router.post("/file")
async def random_from_file(
    file: UploadFile = File(...),
    pick: bool = Form(False),
    provider: Optional[str] = Form(None),
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """
    解析上传的 CSV / Excel / 文本文件

    pick=true 时再从解析出的行中随机选择一项
    """
    content = await file.read()
    rows = parse_file_to_rows(file.filename or "", content)
    result = {"success": True, "rows": rows, "count": len(rows)}

    if pick:
        if not rows:
            raise EmptyListError("The uploaded file contains no rows")
        oracle = oracle_factory(provider)
        result["item"] = await asyncio.to_thread(oracle.random_pick, rows)
        result["provider"] = oracle.provider.id
    return result


@random_router.post("/yolo")
async def yolo_roll(
    provider: Optional[str] = None,
    oracle_factory: OracleFactory = Depends(get_oracle_factory),
):
    """Should you do it? 1..100，大于 50 为 YOLO!"""
    oracle = oracle_factory(provider)
    number, result = await asyncio.to_thread(oracle.roll_yolo)
    return {"success": True, "number": number, "result": result, "provider": oracle.provider.id}
