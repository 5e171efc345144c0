"""SQLAlchemy 엔진/세션 팩토리와 요청 단위 세션 의존성을 정의합니다."""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.config import settings
from app.exceptions import ConflictError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """블록 전체를 하나의 트랜잭션으로 묶는다. 예외 발생 시 롤백 후 그대로 전파한다.

    동시 요청이 유니크 제약에 걸린 경우 IntegrityError 대신 ConflictError로 바꿔 올린다.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("[db] integrity conflict: %s", exc.orig)
        raise ConflictError(
            "동시에 처리된 요청과 충돌했습니다. 다시 시도해 주세요.",
            code="INTEGRITY_CONFLICT",
        ) from exc
    except Exception:
        db.rollback()
        raise
