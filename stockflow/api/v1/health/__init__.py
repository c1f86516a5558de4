from stockflow.api.v1.health.router import router

__all__ = ["router"]
