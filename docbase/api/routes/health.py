from fastapi import APIRouter

from docbase.database.connection import check_db_connection

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint, including a MongoDB ping."""
    database_ok = await check_db_connection()
    return {
        "status": "healthy" if database_ok else "unhealthy",
        "service": "docbase",
        "database": "connected" if database_ok else "disconnected",
    }
