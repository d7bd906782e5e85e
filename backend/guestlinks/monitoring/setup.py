import logging
import time

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

guest_uploads_accepted = Counter("guest_uploads_accepted_total", "Uploads accepted through guest links")
guest_uploads_rejected = Counter(
    "guest_uploads_rejected_total", "Uploads rejected by guest link policy", ["reason"]
)
guest_upload_conflicts = Counter(
    "guest_upload_conflicts_total", "Concurrent upload count updates that lost the race"
)
guest_links_created = Counter("guest_links_created_total", "Guest links issued")

def report_upload_accepted() -> None:
    guest_uploads_accepted.inc()

def report_upload_rejected(reason: str) -> None:
    guest_uploads_rejected.labels(reason=reason).inc()

def report_upload_conflict() -> None:
    guest_upload_conflicts.inc()

def report_guest_link_created() -> None:
    guest_links_created.inc()

def setup_monitoring(app: ASGIApp):
    Instrumentator().instrument(app).expose(app, endpoint="/api/metrics", include_in_schema=False)

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()
        response = None
        try:
            response = await call_next(request)
        except HTTPException as e:
            logger.exception("HTTP exception: %s %s -> %s", request.method, request.url.path, e.detail)
            response = JSONResponse(status_code=e.status_code, content={"detail": e.detail})
        except Exception as e:
            logger.exception("Unhandled error: %s %s -> %s", request.method, request.url.path, e)
            response = JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
        finally:
            process_time = time.time() - start_time
            logger.info("method=%s path=%s status=%s duration=%.4fs",
                        request.method, request.url.path,
                        getattr(response, "status_code", "?"), process_time)
        return response
