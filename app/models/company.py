"""Company 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Company(Base):
    __tablename__ = "companies"

    company_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    industry = Column(String(100))
    contact_person = Column(String(100))
    email = Column(String(100))
    phone = Column(String(15))
    address = Column(Text)
    partnership_date = Column(Date)
    status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE/INACTIVE/BLACKLISTED
    created_at = Column(DateTime, server_default=func.now())

    placements = relationship("Placement", back_populates="company")
