import logging
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from beanie.exceptions import DocumentNotFound
from docbase.api.middleware import RequestContextMiddleware
from docbase.api.routes import api_router
from docbase.config import get_settings
from docbase.database.connection import connect_to_mongo, close_mongo_connection

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Define lifespan context manager for the database connection
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await connect_to_mongo()
    yield
    await close_mongo_connection()

app = FastAPI(
    title="Docbase API",
    description="CRUD API over audit-stamped MongoDB documents",
    version="0.1.0",
    debug=get_settings().debug,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(DocumentNotFound)
async def document_not_found_handler(request: Request, exc: DocumentNotFound):
    logger.info(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Document not found"},
    )


# Include API router
app.include_router(api_router)

@app.get("/", tags=["Health"])
async def root():
    return {"message": "Docbase API is running"}

if __name__ == "__main__":
    uvicorn.run("docbase.main:app", host="0.0.0.0", port=8000, reload=get_settings().debug)
