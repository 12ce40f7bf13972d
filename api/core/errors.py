"""
Error taxonomy and the FastAPI handlers that turn it into `{"msg": ...}` bodies.

Services raise these; routers never catch them. Store-level failures
(`asyncpg.PostgresError`) are mapped by SQLSTATE code, everything else is a
generic 500 that never leaks internal detail.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MSG = "Internal server error"


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_msg = INTERNAL_ERROR_MSG

    def __init__(self, msg: str | None = None) -> None:
        self.msg = msg or self.default_msg
        super().__init__(self.msg)


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_msg = "Bad request"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_msg = "Not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_msg = "Conflict"


class InvalidSortColumn(BadRequestError):
    default_msg = "Invalid sort column"


class InvalidOrder(BadRequestError):
    default_msg = "Invalid order query"


class InvalidTopicToken(BadRequestError):
    default_msg = "Invalid topic query"


class InvalidVoteDelta(BadRequestError):
    default_msg = "Votes entry is invalid"


class InvalidCommentBody(BadRequestError):
    default_msg = "Comment body is invalid"


class InvalidCommentAuthor(BadRequestError):
    default_msg = "Comment author is invalid"


class InvalidResourceId(BadRequestError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid {name}")
        self.name = name


class ArticleNotFound(NotFoundError):
    default_msg = "Article not found"


class TopicNotFound(NotFoundError):
    default_msg = "Topic not found"


class UserNotFound(NotFoundError):
    default_msg = "User not found"


class CommentNotFound(NotFoundError):
    default_msg = "Comment not found"


# SQLSTATE -> (HTTP status, prefer the error's `detail` over its message)
PG_ERROR_MAP: dict[str, tuple[int, bool]] = {
    "22P02": (status.HTTP_400_BAD_REQUEST, False),  # invalid_text_representation
    "23503": (status.HTTP_404_NOT_FOUND, True),  # foreign_key_violation
    "23505": (status.HTTP_409_CONFLICT, True),  # unique_violation
    "23502": (status.HTTP_400_BAD_REQUEST, False),  # not_null_violation
    "23514": (status.HTTP_400_BAD_REQUEST, True),  # check_violation
    "42703": (status.HTTP_400_BAD_REQUEST, False),  # undefined_column
}


def map_postgres_error(exc: asyncpg.PostgresError) -> tuple[int, str] | None:
    """
    Return `(status_code, msg)` for a recognised store error, else None.
    """
    mapped = PG_ERROR_MAP.get(getattr(exc, "sqlstate", None) or "")
    if mapped is None:
        return None
    status_code, prefer_detail = mapped
    # str(exc) appends DETAIL/HINT lines; keep the primary message only.
    message = getattr(exc, "message", None) or (str(exc.args[0]) if exc.args else str(exc))
    detail = getattr(exc, "detail", None)
    return status_code, (detail or message) if prefer_detail else message


def _msg(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"msg": msg})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.msg)
        return _msg(exc.status_code, exc.msg)

    @app.exception_handler(asyncpg.PostgresError)
    async def handle_postgres_error(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
        mapped = map_postgres_error(exc)
        if mapped is None:
            logger.exception("unmapped_store_error path=%s", request.url.path, exc_info=exc)
            return _msg(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MSG)
        status_code, msg = mapped
        logger.warning("store_error sqlstate=%s path=%s -> %s", exc.sqlstate, request.url.path, status_code)
        return _msg(status_code, msg)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("request_validation_failed path=%s errors=%s", request.url.path, exc.errors())
        return _msg(status.HTTP_400_BAD_REQUEST, BadRequestError.default_msg)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _msg(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected_error path=%s", request.url.path, exc_info=exc)
        return _msg(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MSG)
