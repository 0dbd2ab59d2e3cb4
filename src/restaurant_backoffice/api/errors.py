from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import BackofficeError, Conflict, Forbidden, InvalidArgument, InvalidReference, NotFound

STATUS_CODES = {
    NotFound: 404,
    InvalidArgument: 400,
    InvalidReference: 422,
    Conflict: 409,
    Forbidden: 403,
}


async def backoffice_error_handler(request: Request, exc: BackofficeError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in STATUS_CODES.items() if isinstance(exc, error_type)),
        500,
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BackofficeError, backoffice_error_handler)
