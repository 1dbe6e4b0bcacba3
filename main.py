# main.py
import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from database import StoreError, create_database
from routers.products import INVALID_INPUT_DATA, ProductRequestError
from routers.products import router as products_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_database()
    logger.info("Product API started")
    yield


app = FastAPI(title="Product API", lifespan=lifespan)

app.include_router(products_router)


@app.exception_handler(ProductRequestError)
async def product_request_error_handler(request: Request, exc: ProductRequestError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # only reached when the body is not parseable JSON
    logger.warning("Unparseable request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"message": INVALID_INPUT_DATA})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.get("/")
def root():
    return {"message": "Product API running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
