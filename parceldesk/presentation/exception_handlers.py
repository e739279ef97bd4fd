from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from loguru import logger

from parceldesk.core.errors import DomainError
from parceldesk.presentation.auth import LoginRequired


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Domain error: {}", exc.message)
    else:
        logger.info("Domain error ({}): {}", exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    return RedirectResponse(f"/login?role={exc.role.value}", status_code=303)


EXCEPTION_HANDLERS = {
    DomainError: domain_error_handler,
    LoginRequired: login_required_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
