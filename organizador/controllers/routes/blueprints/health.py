"""
Blueprint para health checks.

Rotas:
    - GET /health: Verifica conectividade com o banco de dados
"""

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from organizador import db


# =============================================================================
# BLUEPRINT DEFINITION
# =============================================================================

health_bp = Blueprint('health', __name__)


# =============================================================================
# ROTAS
# =============================================================================

@health_bp.route("/health")
def health_check():
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSON response with health status
        - 200: Healthy
        - 503: Unhealthy (database connection failed)
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": current_app.config.get("APP_VERSION") or "local",
        "checks": {},
    }

    try:
        db.session.execute(text("SELECT 1"))
        db.session.commit()
        health_status["checks"]["database"] = {
            "status": "ok",
            "message": "Database connection successful",
        }
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("Health check falhou: %s", e)
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "error",
            "message": "Database connection failed",
        }
        return jsonify(health_status), 503

    return jsonify(health_status)
