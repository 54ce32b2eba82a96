from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from datarepo.config import settings
from datarepo.database.initializer import DatabaseInitializer
from datarepo.database.manager import DatabaseManager
from datarepo.logging.logger import LogConfig, get_logger
from datarepo.exceptions.errors import BusinessException, RepositoryError
from datarepo.exceptions.handler import global_exception_handler
import apps.models  # noqa: F401  registers tables in SQLModel.metadata
from apps.samples.api.router import router as sample_router

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = DatabaseManager.get_instance()
    await manager.sql.connect()
    if settings.APP_ENV == "development":
        # Production schema is managed by Alembic
        await DatabaseInitializer(manager.sql).create_all_async()
        logger.info("Development schema created")
    yield
    await manager.sql.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Initialize logging configuration
LogConfig.setup_logging()

# Register global exception handlers
app.add_exception_handler(BusinessException, global_exception_handler)
app.add_exception_handler(RepositoryError, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(SQLAlchemyError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(
    sample_router,
    prefix=settings.API_V1_SAMPLES_PREFIX,
    tags=["Samples"]
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
