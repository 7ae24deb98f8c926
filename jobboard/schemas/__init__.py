# __init__.py
from jobboard.schemas.user import LoginForm, SignupForm
from jobboard.schemas.vacancy import VacancyCreateForm, VacancyFilter, VacancyForm

__all__ = [
	"LoginForm",
	"SignupForm",
	"VacancyCreateForm",
	"VacancyFilter",
	"VacancyForm",
]
