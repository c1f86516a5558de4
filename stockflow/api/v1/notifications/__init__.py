from stockflow.api.v1.notifications.router import router

__all__ = ["router"]
