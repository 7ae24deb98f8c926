# __init__.py
from jobboard.models.session import AuthSession
from jobboard.models.user import EXTERNAL_ID_FIELDS, User, UserRole
from jobboard.models.vacancy import Vacancy

__all__ = [
	"AuthSession",
	"EXTERNAL_ID_FIELDS",
	"User",
	"UserRole",
	"Vacancy",
]
