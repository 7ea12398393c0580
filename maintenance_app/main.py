# maintenance_app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from maintenance_app import config
from maintenance_app.auth import router as auth_router
from maintenance_app.auth import seed_manager
from maintenance_app.database import get_db, init_db
from maintenance_app.equipments import router as equipment_router
from maintenance_app.errors import register_error_handlers
from maintenance_app.reports import router as report_router
from maintenance_app.users import router as user_router
from maintenance_app.work_orders import router as work_order_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = None):
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    db_path = app.state.database_path
    init_db(db_path)
    conn = get_db(db_path)
    try:
        seed_manager(conn)
    finally:
        conn.close()
    logger.info("Maintenance API started")
    yield
    logger.info("Maintenance API shutting down")


def create_app(database_path: str = None) -> FastAPI:
    app = FastAPI(title="Equipment Maintenance API", lifespan=lifespan)
    app.state.database_path = database_path or config.DATABASE_PATH

    # Enable CORS for the frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Register routers
    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(user_router, prefix="/api/users", tags=["Users"])
    app.include_router(equipment_router, prefix="/api/equipment", tags=["Equipment"])
    app.include_router(work_order_router, prefix="/api/work-orders", tags=["Work Orders"])
    app.include_router(report_router, prefix="/api/reports", tags=["Reports"])

    @app.get("/", response_class=PlainTextResponse)
    def read_root():
        return "OKAY API WORKING"

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
