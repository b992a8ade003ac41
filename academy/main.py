import logging.config

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from academy.api.v1.attendance.router import router as attendance_router
from academy.api.v1.auth.router import router as auth_router
from academy.api.v1.classes.router import router as classes_router
from academy.api.v1.enrollments.router import router as enrollments_router
from academy.api.v1.makeup.router import router as makeup_router
from academy.api.v1.reports.router import router as reports_router
from academy.api.v1.students.router import router as students_router
from academy.core.config import LOGGING


def create_app() -> FastAPI:
    logging.config.dictConfig(LOGGING)

    app = FastAPI(title="Academy Attendance Backend")

    # CORS: allow the dashboard frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(classes_router)
    app.include_router(enrollments_router)
    app.include_router(attendance_router)
    app.include_router(makeup_router)
    app.include_router(reports_router)

    return app


app = create_app()
