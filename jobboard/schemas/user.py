# user.py
from pydantic import BaseModel

from jobboard.models.user import UserRole


class LoginForm(BaseModel):
    username: str = ""
    password: str = ""


class SignupForm(BaseModel):
    username: str = ""
    password: str = ""
    role: UserRole = UserRole.CANDIDATE
