# vacancy_service.py
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from jobboard.errors import StoreFailure
from jobboard.models.user import User
from jobboard.models.vacancy import Vacancy
from jobboard.schemas.vacancy import VacancyCreateForm, VacancyFilter, VacancyForm


T = TypeVar("T")

EDITABLE_FIELDS = ("title", "description", "category", "tags", "location", "contract")


def _run(db: Session, operation: Callable[[], T]) -> T:
    try:
        return operation()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure(str(exc)) from exc


def create_vacancy(db: Session, payload: VacancyCreateForm, requester: User) -> Vacancy:
    def _create() -> Vacancy:
        values: dict[str, Any] = payload.model_dump(include=set(EDITABLE_FIELDS))
        company_id = payload.company_id if payload.company_id is not None else requester.id
        vacancy = Vacancy(**values, company_id=company_id, applications=[])
        db.add(vacancy)
        db.commit()
        db.refresh(vacancy)
        return vacancy

    return _run(db, _create)


def get_vacancy(db: Session, vacancy_id: int) -> Vacancy | None:
    return _run(
        db,
        lambda: db.query(Vacancy).options(joinedload(Vacancy.company)).filter(Vacancy.id == vacancy_id).first(),
    )


def list_vacancies_for(db: Session, user: User) -> list[Vacancy]:
    """Companies see their own postings; everyone else sees all of them."""

    def _list() -> list[Vacancy]:
        query = db.query(Vacancy).options(joinedload(Vacancy.company))
        if user.is_company:
            query = query.filter(Vacancy.company_id == user.id)
        return query.order_by(Vacancy.id).all()

    return _run(db, _list)


def filter_vacancies(db: Session, criteria: VacancyFilter) -> list[Vacancy]:
    # Case-insensitive prefix match on each field; the input is matched literally.
    def _filter() -> list[Vacancy]:
        return (
            db.query(Vacancy)
            .options(joinedload(Vacancy.company))
            .filter(Vacancy.title.istartswith(criteria.title, autoescape=True))
            .filter(Vacancy.category.istartswith(criteria.category, autoescape=True))
            .filter(Vacancy.location.istartswith(criteria.location, autoescape=True))
            .order_by(Vacancy.id)
            .all()
        )

    return _run(db, _filter)


def update_vacancy(db: Session, vacancy_id: int, payload: VacancyForm) -> Vacancy | None:
    """Replace the editable fields; returns None when the vacancy does not exist."""

    def _update() -> Vacancy | None:
        vacancy = db.query(Vacancy).filter(Vacancy.id == vacancy_id).first()
        if vacancy is None:
            return None
        for field, value in payload.model_dump(include=set(EDITABLE_FIELDS)).items():
            setattr(vacancy, field, value)
        db.commit()
        db.refresh(vacancy)
        return vacancy

    return _run(db, _update)


def delete_vacancy(db: Session, vacancy_id: int) -> bool:
    def _delete() -> bool:
        removed = db.query(Vacancy).filter(Vacancy.id == vacancy_id).delete(synchronize_session=False)
        db.commit()
        return bool(removed)

    return _run(db, _delete)
