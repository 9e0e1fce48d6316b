"""
异常 -> {"success": false, "message": ...} 响应

- RandomnessError 子类: 使用各自的 status_code
- RequestValidationError (请求体格式错误): 400
- 其他未处理异常: 500，完整堆栈只写日志
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from randomness_wtf.errors import RandomnessError

logger = logging.getLogger(__name__)


def failure_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def _handle_randomness_error(request: Request, exc: RandomnessError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[API] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    else:
        logger.warning(f"[API] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return failure_response(exc.status_code, exc.message)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"
    else:
        message = "Invalid request"
    logger.warning(f"[API] {request.method} {request.url.path} -> 400: {message}")
    return failure_response(400, message)


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[API] {request.method} {request.url.path} 未处理的异常: {exc}")
    return failure_response(500, str(exc) or "An unknown error occurred")


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RandomnessError, _handle_randomness_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
