# user.py
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jobboard.database import Base


class UserRole(str, Enum):
    CANDIDATE = "candidate"
    COMPANY = "company"


# Provider name -> column holding that provider's subject id.
EXTERNAL_ID_FIELDS = {
    "github": "github_id",
    "google": "google_id",
    "linkedin": "linkedin_id",
    "xing": "xing_id",
}


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, index=True, nullable=True)
    # Only local accounts carry a hash; external-provider users may have none.
    password_hash = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CANDIDATE.value)
    github_id = Column(String(255), unique=True, index=True, nullable=True)
    google_id = Column(String(255), unique=True, index=True, nullable=True)
    linkedin_id = Column(String(255), unique=True, index=True, nullable=True)
    xing_id = Column(String(255), unique=True, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    vacancies = relationship("Vacancy", back_populates="company")

    @property
    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY.value

    @property
    def display_name(self) -> str:
        if self.username:
            return self.username
        for provider, field in EXTERNAL_ID_FIELDS.items():
            if getattr(self, field):
                return f"{provider} user"
        return f"user {self.id}"
