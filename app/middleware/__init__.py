"""HTTP middleware. Applied in app.main; the last one added is outermost."""

from app.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
