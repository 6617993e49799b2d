"""Document Routes — PDF library, training materials and study protocols.

Invariants:
    - Uploads must be application/pdf and no larger than max_upload_bytes
    - The stored file and its row are created together; a failed commit removes the file
    - Uploads are never read past max_upload_bytes + 1 bytes
    - Deleting a PDF commits the row removal first, then removes the file; a file
      that is already gone or cannot be removed is logged, not fatal
    - Files are only served from the tenant's own storage directory

Design Decisions:
    - Files on local disk (DocumentStorage), metadata in the database
    - /mobile/pdfs kept as a separate path for the mobile client's resources tab
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trialengage.api.dependencies import (
    get_company_or_404, get_document_storage, require_admin, require_member,
)
from trialengage.config import Settings, get_settings
from trialengage.core.errors import (
    ErrorContext, ResourceNotFoundError, StorageError, UploadRejectedError,
)
from trialengage.infrastructure.database import get_db
from trialengage.infrastructure.file_storage import DocumentStorage
from trialengage.infrastructure.tokens import Principal
from trialengage.models.company import Company
from trialengage.models.documents import PdfDocument, StudyProtocol, TrainingMaterial
from trialengage.schemas.common import dump
from trialengage.schemas.documents import (
    PdfResponse, StudyProtocolCreate, StudyProtocolResponse,
    TrainingMaterialCreate, TrainingMaterialResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/company/{company_id}", tags=["documents"])

PDF_CONTENT_TYPE = "application/pdf"


async def _get_or_404(model, label: str, company_id: str, row_id: UUID, db: AsyncSession):
    result = await db.execute(
        select(model).where(model.id == row_id, model.company_id == company_id),
    )
    row = result.scalar_one_or_none()
    if not row:
        raise ResourceNotFoundError(
            label, str(row_id), ErrorContext(company_id=company_id),
        )
    return row


def _too_large(limit: int) -> UploadRejectedError:
    return UploadRejectedError(
        f"File exceeds {limit // (1024 * 1024)} MB limit",
        http_status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    )


async def _list_pdfs(company_id: str, db: AsyncSession) -> list[dict]:
    rows = (await db.execute(
        select(PdfDocument).where(PdfDocument.company_id == company_id)
        .order_by(PdfDocument.created_at.desc()),
    )).scalars().all()
    return [dump(PdfResponse, p) for p in rows]


# ─── PDFs ────────────────────────────────────────────────────────

@router.post(
    "/pdfs", status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def upload_pdf(
    pdf_file: UploadFile = File(...),
    title: str = Form(..., min_length=1, max_length=300),
    description: str = Form("", max_length=5000),
    category: str = Form("General", min_length=1, max_length=100),
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    settings: Settings = Depends(get_settings),
):
    """Store an uploaded PDF and its metadata."""
    if pdf_file.content_type != PDF_CONTENT_TYPE:
        raise UploadRejectedError("Only PDF files are allowed")
    limit = settings.max_upload_bytes
    if pdf_file.size is not None and pdf_file.size > limit:
        raise _too_large(limit)
    data = await pdf_file.read(limit + 1)
    if len(data) > limit:
        raise _too_large(limit)
    if not data:
        raise UploadRejectedError("Uploaded file is empty")

    original_name = pdf_file.filename or "document.pdf"
    filename = storage.save(company.id, original_name, data)
    pdf = PdfDocument(
        company_id=company.id,
        title=title.strip(),
        description=description,
        category=category,
        filename=filename,
        original_name=original_name,
        size_bytes=len(data),
    )
    db.add(pdf)
    try:
        await db.commit()
    except Exception:
        storage.delete(company.id, filename)  # no orphan file on commit failure
        raise
    await db.refresh(pdf)
    logger.info(
        f"PDF uploaded: {filename} ({len(data)} bytes)",
        extra={"company_id": company.id},
    )
    return {
        "success": True,
        "message": "PDF uploaded successfully",
        "pdf": dump(PdfResponse, pdf),
    }


@router.get("/pdfs", dependencies=[Depends(require_member)])
async def list_pdfs(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    return {"success": True, "pdfs": await _list_pdfs(company.id, db)}


@router.get("/mobile/pdfs", dependencies=[Depends(require_member)])
async def list_mobile_pdfs(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    return {"success": True, "pdfs": await _list_pdfs(company.id, db)}


@router.get("/pdfs/{pdf_id}/file", dependencies=[Depends(require_member)])
async def download_pdf(
    pdf_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    pdf = await _get_or_404(PdfDocument, "PDF", company.id, pdf_id, db)
    if not storage.exists(company.id, pdf.filename):
        logger.warning(
            f"PDF row {pdf_id} has no file {pdf.filename}",
            extra={"company_id": company.id},
        )
        raise ResourceNotFoundError(
            "File", pdf.filename, ErrorContext(company_id=company.id),
        )
    return FileResponse(
        storage.path_for(company.id, pdf.filename),
        media_type=PDF_CONTENT_TYPE,
        filename=pdf.original_name,
        content_disposition_type="inline",
    )


@router.delete("/pdfs/{pdf_id}", dependencies=[Depends(require_admin)])
async def delete_pdf(
    pdf_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    pdf = await _get_or_404(PdfDocument, "PDF", company.id, pdf_id, db)
    await db.delete(pdf)
    await db.commit()
    try:
        removed = storage.delete(company.id, pdf.filename)
    except StorageError:
        logger.error(
            f"PDF {pdf_id} deleted but {pdf.filename} is left on disk",
            extra={"company_id": company.id},
        )
    else:
        if not removed:
            logger.warning(
                f"File {pdf.filename} already missing", extra={"company_id": company.id},
            )
    return {"success": True, "message": "PDF deleted successfully"}


# ─── Training materials ─────────────────────────────────────────

@router.get("/training-materials", dependencies=[Depends(require_member)])
async def list_training_materials(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    rows = (await db.execute(
        select(TrainingMaterial).where(TrainingMaterial.company_id == company.id)
        .order_by(TrainingMaterial.created_at.desc()),
    )).scalars().all()
    return {
        "success": True,
        "materials": [dump(TrainingMaterialResponse, m) for m in rows],
    }


@router.post("/training-materials", status_code=status.HTTP_201_CREATED)
async def create_training_material(
    body: TrainingMaterialCreate,
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    material = TrainingMaterial(
        company_id=company.id,
        created_by=principal.subject,
        **body.model_dump(mode="json"),
    )
    db.add(material)
    await db.commit()
    await db.refresh(material)
    return {
        "success": True,
        "message": "Training material created",
        "material": dump(TrainingMaterialResponse, material),
    }


@router.delete(
    "/training-materials/{material_id}", dependencies=[Depends(require_admin)],
)
async def delete_training_material(
    material_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    material = await _get_or_404(
        TrainingMaterial, "Training material", company.id, material_id, db,
    )
    await db.delete(material)
    await db.commit()
    return {"success": True, "message": "Training material deleted"}


# ─── Study protocols ────────────────────────────────────────────

@router.get("/study-protocols", dependencies=[Depends(require_member)])
async def list_study_protocols(
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    rows = (await db.execute(
        select(StudyProtocol).where(StudyProtocol.company_id == company.id)
        .order_by(StudyProtocol.created_at.desc()),
    )).scalars().all()
    return {
        "success": True,
        "protocols": [dump(StudyProtocolResponse, p) for p in rows],
    }


@router.post("/study-protocols", status_code=status.HTTP_201_CREATED)
async def create_study_protocol(
    body: StudyProtocolCreate,
    company: Company = Depends(get_company_or_404),
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    protocol = StudyProtocol(
        company_id=company.id,
        created_by=principal.subject,
        **body.model_dump(mode="json"),
    )
    db.add(protocol)
    await db.commit()
    await db.refresh(protocol)
    return {
        "success": True,
        "message": "Study protocol created",
        "protocol": dump(StudyProtocolResponse, protocol),
    }


@router.delete(
    "/study-protocols/{protocol_id}", dependencies=[Depends(require_admin)],
)
async def delete_study_protocol(
    protocol_id: UUID,
    company: Company = Depends(get_company_or_404),
    db: AsyncSession = Depends(get_db),
):
    protocol = await _get_or_404(
        StudyProtocol, "Study protocol", company.id, protocol_id, db,
    )
    await db.delete(protocol)
    await db.commit()
    return {"success": True, "message": "Study protocol deleted"}
