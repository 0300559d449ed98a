import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from receipt_processor.config import Settings, configure_logging, load_settings
from receipt_processor.model.PayloadModel import (
    MessageResponse,
    PointsResponse,
    ReceiptIdResponse,
    ReceiptPayload,
)
from receipt_processor.scoring.points import ReceiptParseError, score
from receipt_processor.store.memory import InMemoryReceiptStore, ReceiptStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts")


class ReceiptNotFoundError(LookupError):
    def __init__(self, receipt_id: str):
        self.receipt_id = receipt_id
        super().__init__(f"No receipt stored under {receipt_id}")


def get_store(request: Request) -> ReceiptStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    "/process",
    status_code=201,
    response_model=ReceiptIdResponse,
    responses={400: {"model": MessageResponse}},
)
def process_receipt(payload: ReceiptPayload, store: ReceiptStore = Depends(get_store)):
    receipt_id = store.put(payload.to_receipt())
    logger.debug("Stored receipt %s from %s", receipt_id, payload.retailer)
    return ReceiptIdResponse(id=receipt_id)


@router.get(
    "/{receipt_id}/points",
    response_model=PointsResponse,
    responses={404: {"model": MessageResponse}, 422: {"model": MessageResponse}},
)
def get_receipt_points(
    receipt_id: str,
    store: ReceiptStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    receipt = store.get(receipt_id)
    if receipt is None:
        raise ReceiptNotFoundError(receipt_id)
    return PointsResponse(points=score(receipt, strict=not settings.lenient_scoring))


def format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        # Drop the leading "body" segment so paths read like the JSON fields.
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        if location:
            messages.append(f"{'.'.join(location)}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return "; ".join(messages) or "The receipt is invalid."


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": format_validation_errors(exc)})


async def not_found_exception_handler(request: Request, exc: ReceiptNotFoundError):
    return JSONResponse(status_code=404, content={"message": "Receipt not found"})


async def parse_error_exception_handler(request: Request, exc: ReceiptParseError):
    logger.warning("Could not score receipt at %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"message": str(exc)})


def create_app(store: Optional[ReceiptStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="Receipt Processor")
    app.state.store = store if store is not None else InMemoryReceiptStore()
    app.state.settings = settings if settings is not None else load_settings()

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ReceiptNotFoundError, not_found_exception_handler)
    app.add_exception_handler(ReceiptParseError, parse_error_exception_handler)
    app.include_router(router)
    return app


def main():
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting receipt processor on %s:%s", settings.host, settings.port)
    # uvicorn exits the process with status 1 when it cannot bind.
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
