from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from app.core.config import settings
from app.core.exceptions import LessonServiceError
from app.core.logging import configure_logging
from app.endpoints import teacher_lesson, lesson_schedule, student_lesson
from fastapi.exceptions import RequestValidationError
from app.middleware.exceptions import global_exception_handler, validation_exception_handler, lesson_service_exception_handler
from app.middleware.logging import RequestLoggingMiddleware
from app.services.audit import register_audit_handlers
from app.utils.events import event_bus

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(LessonServiceError, lesson_service_exception_handler)

app.include_router(teacher_lesson.router, tags=["Teacher Lessons"])
app.include_router(lesson_schedule.router, tags=["Lesson Schedules"])
app.include_router(student_lesson.router, tags=["Student Lessons"])

@app.on_event("startup")
async def startup_event():
    configure_logging()
    register_audit_handlers()

@app.on_event("shutdown")
async def shutdown_event():
    event_bus.wait_idle()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
