from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
import uvicorn

from config import get_settings
from errors import ApiError, api_error_handler, server_error_handler, validation_error_handler
from logger import logger
from mongo_service import client, db, ensure_transfer_schema, wait_for_mongo
from routes import router
from ui_routes import router as ui_router


def create_app():
    settings = get_settings()
    app = FastAPI(title="Transfer Service")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup():
        logger.info("Transfer Service startup")
        if not settings.exchange_rate_api_key:
            logger.warning("EXCHANGE_RATE_API_KEY не задан, запросы курсов будут отклонены провайдером")
        await wait_for_mongo()
        await ensure_transfer_schema(db)

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("Transfer Service shutdown")
        client.close()

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, server_error_handler)

    Instrumentator().instrument(app).expose(app)
    app.include_router(router)
    app.include_router(ui_router)

    return app

app = create_app()

if __name__ == '__main__':
    uvicorn.run(app, host="0.0.0.0", port=8000)
