"""
Django Ninja API configuration.
"""

from django.db import DatabaseError, connection
from django.http import HttpRequest
from ninja import NinjaAPI

from apps.core.logging import get_logger
from apps.scheduling.api import router as scheduling_router
from apps.subscriptions.api import internal_router as orders_router
from apps.subscriptions.api import router as subscriptions_router

logger = get_logger(__name__)

api = NinjaAPI(
    title="Session Scheduler API",
    version="1.0.0",
    description="Session change ingestion and subscription management for the session scheduler.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {
                "name": "scheduling",
                "description": "Internal ingestion of session changes into one-shot schedules",
            },
            {
                "name": "subscriptions",
                "description": "Organization, event and session subscriptions for reminder emails",
            },
            {
                "name": "health",
                "description": "Service health and readiness checks",
            },
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "Keycloak access token. Include as: Authorization: Bearer <token>",
                },
                "apiKeyAuth": {
                    "type": "apiKey",
                    "in": "header",
                    "name": "X-API-Key",
                    "description": "Shared key for service-to-service calls",
                },
            }
        },
    },
)

# Register routers
api.add_router("/internal", scheduling_router)
api.add_router("/subscriptions", subscriptions_router)
api.add_router("/internal/orders", orders_router)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}


@api.get(
    "/health/ready",
    tags=["health"],
    response={200: dict, 503: dict},
    operation_id="readinessCheck",
    summary="Readiness check",
)
def readiness_check(request: HttpRequest):
    """Ready once the database answers."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.warning("readiness_check_failed", error=str(e))
        return 503, {"status": "unavailable", "database": "error"}
    return 200, {"status": "ok", "database": "ok"}
