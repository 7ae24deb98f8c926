# vacancy.py
from typing import Optional

from pydantic import BaseModel


class VacancyForm(BaseModel):
    """Editable vacancy fields as submitted by the create/edit forms."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    location: Optional[str] = None
    contract: Optional[str] = None


class VacancyCreateForm(VacancyForm):
    # Defaults to the requesting company when omitted.
    company_id: Optional[int] = None


class VacancyFilter(BaseModel):
    title: str = ""
    category: str = ""
    location: str = ""
    # Accepted for form compatibility; not used by the filter.
    tags: Optional[str] = None
