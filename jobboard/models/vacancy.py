# vacancy.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jobboard.database import Base


class Vacancy(Base):
    __tablename__ = "vacancies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String(255), index=True, nullable=True)
    tags = Column(String(500), nullable=True)
    location = Column(String(255), index=True, nullable=True)
    contract = Column(String(100), nullable=True)
    company_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    applications = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    company = relationship("User", back_populates="vacancies")
