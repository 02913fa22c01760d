import logging

from fastapi import APIRouter, Request

from shop_api.config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

COMPONENTS = ("api", "database", "storage")


@router.get("/health")
def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of API, document store and image bucket along with deployment mode.
    """
    settings: Settings = request.app.state.settings

    health_status = {
        "status": "ok",
        "deployment_mode": settings.deployment_mode,
        "components": {
            "api": "ready",
            "database": "initializing",
            "storage": "initializing",
        },
        "ready": False,
    }

    # Check document store
    try:
        request.app.state.document_store.count_documents("categories")
        health_status["components"]["database"] = "ready"
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        health_status["components"]["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Check image bucket
    try:
        request.app.state.s3_client.head_bucket(Bucket=settings.s3_bucket_name)
        health_status["components"]["storage"] = "ready"
    except Exception as e:
        logger.warning(f"Storage health check failed: {e}")
        health_status["components"]["storage"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    health_status["ready"] = all(health_status["components"][comp] == "ready" for comp in COMPONENTS)

    return health_status
