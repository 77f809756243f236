from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockledger.api.v1.routes_inventory import router as inventory_router
from stockledger.api.v1.routes_orders import router as orders_router
from stockledger.api.v1.routes_transactions import router as transactions_router
from stockledger.core.errors import InvalidInputError, NotFoundError, StoreError
from stockledger.core.logging import configure_logging
from stockledger.db.base import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_db()
    yield


app = FastAPI(title="Stock Ledger API", lifespan=lifespan)

app.include_router(orders_router)
app.include_router(inventory_router)
app.include_router(transactions_router)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies and query values are client errors like any other bad input
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"][1:]) or first["loc"][0]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid field {field}: {first['msg']}"},
    )

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    # details are already logged where the store failed
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": exc.message})


@app.get("/health")
async def health():
    return {"status": "ok"}
