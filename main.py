from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnhub.core.config import settings
from learnhub.core.logging import configure_logging
from learnhub.endpoints import auth, users, course, lesson, progress, certificate, chat, upload
from learnhub.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from learnhub.middleware.logging import RequestLoggingMiddleware
from learnhub.models import registry  # noqa: F401

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])
app.include_router(course.router, prefix=f"{settings.API_PREFIX}/courses", tags=["Courses"])
app.include_router(lesson.router, prefix=f"{settings.API_PREFIX}/lessons", tags=["Lessons"])
app.include_router(progress.router, prefix=f"{settings.API_PREFIX}/progress", tags=["Progress"])
app.include_router(certificate.router, prefix=f"{settings.API_PREFIX}/certificates", tags=["Certificates"])
app.include_router(chat.router, prefix=f"{settings.API_PREFIX}/chat", tags=["Chat"])
app.include_router(upload.router, prefix=f"{settings.API_PREFIX}/upload", tags=["Upload"])


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
