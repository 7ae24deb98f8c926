# vacancies.py
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.errors import StoreFailure
from jobboard.models.user import User
from jobboard.routers.dependencies import require_access
from jobboard.schemas.vacancy import VacancyCreateForm, VacancyFilter, VacancyForm
from jobboard.services import vacancy_service
from jobboard.templating import templates


router = APIRouter(tags=["vacancies"])

logger = logging.getLogger(__name__)

LIST_URL = "/vacancies"


def _to_list() -> RedirectResponse:
    return RedirectResponse(LIST_URL, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/vacancy/create", response_class=HTMLResponse, summary="Render the vacancy creation form")
def create_form(request: Request, current_user: User = Depends(require_access("vacancy.create_form"))):
    return templates.TemplateResponse(request, "vacancy/add_vacancy.html", {"user": current_user})


@router.post("/vacancy/create", summary="Create a vacancy")
def create_vacancy(
    payload: Annotated[VacancyCreateForm, Form()],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.create")),
) -> RedirectResponse:
    try:
        vacancy = vacancy_service.create_vacancy(db, payload, current_user)
        logger.info("vacancy.create id=%s company_id=%s", vacancy.id, vacancy.company_id)
    except StoreFailure:
        logger.exception("vacancy.create failed user_id=%s", current_user.id)
    return _to_list()


@router.get("/vacancy/details/{vacancy_id}", response_class=HTMLResponse, summary="Render a vacancy's details")
def vacancy_details(
    vacancy_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.details")),
):
    try:
        vacancy = vacancy_service.get_vacancy(db, vacancy_id)
    except StoreFailure:
        logger.exception("vacancy.details failed id=%s", vacancy_id)
        return _to_list()
    return templates.TemplateResponse(
        request, "vacancy/details_vacancy.html", {"vacancy": vacancy, "user": current_user}
    )


@router.get("/vacancies", response_class=HTMLResponse, summary="Render own (company) or all vacancies")
def list_vacancies(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.list")),
):
    template = "vacancy/list_vacancies.html" if current_user.is_company else "vacancy/list_vacancies_personal.html"
    try:
        vacancies = vacancy_service.list_vacancies_for(db, current_user)
    except StoreFailure:
        logger.exception("vacancy.list failed user_id=%s", current_user.id)
        vacancies = []
    return templates.TemplateResponse(request, template, {"vacancies": vacancies, "user": current_user})


@router.get("/vacancies/filters", response_class=HTMLResponse, summary="Filter vacancies by prefix")
def filter_vacancies(
    request: Request,
    criteria: Annotated[VacancyFilter, Query()],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.filter")),
):
    try:
        vacancies = vacancy_service.filter_vacancies(db, criteria)
    except StoreFailure:
        logger.exception("vacancy.filter failed user_id=%s", current_user.id)
        vacancies = []
    return templates.TemplateResponse(
        request,
        "vacancy/list_vacancies_personal.html",
        {"vacancies": vacancies, "user": current_user, "filters": criteria},
    )


@router.post("/vacancy/delete/{vacancy_id}", summary="Delete a vacancy")
def delete_vacancy(
    vacancy_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.delete")),
) -> RedirectResponse:
    try:
        removed = vacancy_service.delete_vacancy(db, vacancy_id)
        logger.info("vacancy.delete id=%s removed=%s", vacancy_id, removed)
    except StoreFailure:
        logger.exception("vacancy.delete failed id=%s", vacancy_id)
    return _to_list()


@router.post("/vacancy/edit/{vacancy_id}", summary="Apply edits to a vacancy")
def update_vacancy(
    vacancy_id: int,
    payload: Annotated[VacancyForm, Form()],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.update")),
) -> RedirectResponse:
    try:
        updated = vacancy_service.update_vacancy(db, vacancy_id, payload)
        logger.info("vacancy.update id=%s found=%s", vacancy_id, updated is not None)
    except StoreFailure:
        logger.exception("vacancy.update failed id=%s", vacancy_id)
    return _to_list()


@router.get("/vacancy/edit/{vacancy_id}", response_class=HTMLResponse, summary="Render the vacancy edit form")
def edit_form(
    vacancy_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_access("vacancy.edit_form")),
):
    try:
        vacancy = vacancy_service.get_vacancy(db, vacancy_id)
    except StoreFailure:
        logger.exception("vacancy.edit_form failed id=%s", vacancy_id)
        vacancy = None
    # A missing id still renders the form, with no vacancy.
    return templates.TemplateResponse(request, "vacancy/edit_vacancy.html", {"vacancy": vacancy, "user": current_user})
