"""FastAPI 애플리케이션 진입점. 미들웨어, 예외 핸들러, API 라우터를 등록합니다."""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.database import Base, engine
from app.exceptions import InstituteError
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import (
    auth, courses, employees, companies, batches, students, leads, placements,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Institute Management API",
    description="배치 정원 원장, 수강생/리드/취업 상태 관리, 리드 전환을 제공하는 교육기관 관리 백엔드",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InstituteError)
async def institute_error_handler(request: Request, exc: InstituteError):
    if exc.status_code >= 500:
        logger.error("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("[api] %s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Register all routers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(employees.router)
app.include_router(companies.router)
app.include_router(batches.router)
app.include_router(students.router)
app.include_router(leads.router)
app.include_router(placements.router)


@app.on_event("startup")
def ensure_schema():
    # 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Institute Management API"}
