"""Identity (KYC) validation: document submission and admin review."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hopeshare.core.exceptions import InvalidInputError, NotFoundError, StorageError
from hopeshare.models.identity_validation import IdentityValidation
from hopeshare.schemas.validation import DocumentUpload
from hopeshare.services import storage
from hopeshare.services.users import get_user_or_404

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ("APPROVED", "REJECTED")


async def get_validation(db: AsyncSession, user_id: uuid.UUID) -> IdentityValidation:
    validation = await db.scalar(
        select(IdentityValidation).where(IdentityValidation.user_id == user_id)
    )
    if validation is None:
        raise NotFoundError("Validation not found")
    return validation


async def _upload_documents(user_id: uuid.UUID, documents: list[DocumentUpload]) -> list[dict]:
    decoded = []
    for doc in documents:
        raw, announced = storage.decode_base64_document(doc.content)
        content_type = doc.content_type or announced or "application/octet-stream"
        if content_type not in storage.ALLOWED_DOCUMENT_TYPES:
            raise InvalidInputError(f"Unsupported document type '{content_type}'")
        decoded.append((doc.name, raw, content_type))

    uploaded: list[dict] = []
    try:
        for name, raw, content_type in decoded:
            key = storage.build_key(f"validations/{user_id}", name)
            stored = await storage.upload(key, raw, content_type)
            uploaded.append({"name": name, "content_type": content_type, **stored})
    except StorageError:
        await _discard_documents(uploaded)
        raise
    return uploaded


async def _discard_documents(documents: list[dict]) -> None:
    for doc in documents:
        try:
            await storage.delete(doc["key"])
        except StorageError:
            logger.warning("Could not remove stored document %s", doc["key"])


async def save_validation(
    db: AsyncSession,
    user_id: uuid.UUID,
    cnpj: str | None,
    company_name: str | None,
    documents: list[DocumentUpload],
) -> tuple[IdentityValidation, bool]:
    """Create or resubmit the user's validation. Returns (record, created)."""
    await get_user_or_404(db, user_id)
    uploaded = await _upload_documents(user_id, documents)

    validation = await db.scalar(
        select(IdentityValidation).where(IdentityValidation.user_id == user_id)
    )
    created = validation is None
    previous: list[dict] = []

    try:
        if created:
            validation = IdentityValidation(
                user_id=user_id,
                status="PENDING",
                cnpj=cnpj,
                company_name=company_name,
                documents=uploaded,
            )
            db.add(validation)
        else:
            previous = list(validation.documents or [])
            validation.cnpj = cnpj
            validation.company_name = company_name
            validation.documents = uploaded
            validation.status = "PENDING"
            validation.observation = None
            validation.observation_read = True
        await db.flush()
    except SQLAlchemyError:
        await _discard_documents(uploaded)
        raise

    for doc in previous:
        storage.delete_after_commit(db, doc["key"])
    logger.info("Validation for user %s submitted with %d documents", user_id, len(uploaded))
    return validation, created


async def review_validation(
    db: AsyncSession,
    validation_id: uuid.UUID,
    status: str | None,
    observation: str | None,
) -> IdentityValidation:
    """Approve or reject. The caller is checked by the route."""
    requested = (status or "").strip().upper()
    if requested not in REVIEW_STATUSES:
        raise InvalidInputError("status must be APPROVED or REJECTED")

    validation = await db.get(IdentityValidation, validation_id)
    if validation is None:
        raise NotFoundError("Validation not found")

    validation.status = requested
    validation.observation = observation
    validation.observation_read = False
    await db.flush()
    logger.info("Validation %s reviewed as %s", validation.id, requested)
    return validation


async def list_pending(db: AsyncSession) -> list[IdentityValidation]:
    result = await db.execute(
        select(IdentityValidation)
        .where(IdentityValidation.status == "PENDING")
        .order_by(IdentityValidation.created_at)
    )
    return list(result.scalars().all())
