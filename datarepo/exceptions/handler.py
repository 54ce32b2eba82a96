from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import MultipleResultsFound, SQLAlchemyError
from datarepo.logging.logger import get_logger
from datarepo.response import ResponseModel
from datarepo.config import settings
from .errors import BusinessException, RepositoryError

logger = get_logger("exception_handler")


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    path = request.url.path

    if isinstance(exc, BusinessException):
        logger.warning(f"{path} - BusinessError: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(code=exc.code, message=exc.message, data=exc.detail)
        )

    if isinstance(exc, RepositoryError):
        logger.warning(f"{path} - RepositoryError: {exc}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ResponseModel.fail(code=400, message=str(exc))
        )

    if isinstance(exc, RequestValidationError):
        logger.error(f"{path} - ValidationError: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content=ResponseModel.fail(code=422, message="Invalid request parameters", data=jsonable_encoder(exc.errors()))
        )

    if isinstance(exc, MultipleResultsFound):
        logger.warning(f"{path} - NonUniqueResult: {exc}")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=ResponseModel.fail(code=409, message="More than one record matches")
        )

    if isinstance(exc, SQLAlchemyError):
        logger.critical(f"{path} - DatabaseError: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ResponseModel.fail(code=500, message="Service temporarily unavailable")
        )

    logger.opt(exception=True).error(f"{path} - UncaughtException: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ResponseModel.fail(
            code=500,
            message="System busy, please try again later",
            data={"error": str(exc)} if settings.DEBUG else None
        )
    )
