"""Identity validation endpoints (document submission and admin review)."""

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.dependencies import get_db, parse_id, require_admin
from hopeshare.models.user import User
from hopeshare.schemas.validation import (
    ValidationResponse,
    ValidationReviewRequest,
    ValidationSubmitRequest,
)
from hopeshare.services import validations

router = APIRouter()


@router.post("", response_model=ValidationResponse)
async def submit_validation(
    body: ValidationSubmitRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> ValidationResponse:
    """First submission answers 201, resubmissions 200."""
    validation, created = await validations.save_validation(
        db, body.user_id, body.cnpj, body.company_name, body.documents
    )
    response.status_code = 201 if created else 200
    return ValidationResponse.model_validate(validation)


@router.get("/admin/{user_id}/pending", response_model=list[ValidationResponse])
async def list_pending_validations(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[ValidationResponse]:
    return [ValidationResponse.model_validate(v) for v in await validations.list_pending(db)]


@router.patch("/admin/{user_id}", response_model=ValidationResponse)
async def review_validation(
    body: ValidationReviewRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ValidationResponse:
    validation_id = parse_id(body.validation_id, "validation_id", "Validation not found")
    validation = await validations.review_validation(
        db, validation_id, body.status, body.observation
    )
    return ValidationResponse.model_validate(validation)


@router.get("/{user_id}", response_model=ValidationResponse)
async def get_validation(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ValidationResponse:
    return ValidationResponse.model_validate(await validations.get_validation(db, user_id))
