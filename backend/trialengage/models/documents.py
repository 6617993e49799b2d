"""Document ORMs — uploaded PDFs, training materials, and study protocols.

Invariants:
    - All rows scoped by company_id
    - PdfDocument.filename names a file in the tenant's storage directory
    - TrainingMaterial/StudyProtocol content is inline text or a URL, never a file on disk

Design Decisions:
    - Three small tables in one module: they share shape and are always read together
      by the resources screen
"""

from sqlalchemy import String, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column

from trialengage.models.base import Base, TenantScoped


class PdfDocument(TenantScoped, Base):
    __tablename__ = "pdf_documents"

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    filename: Mapped[str] = mapped_column(String(300), nullable=False)
    original_name: Mapped[str] = mapped_column(String(300), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / (1024 * 1024):.2f} MB"


class TrainingMaterial(TenantScoped, Base):
    __tablename__ = "training_materials"

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    created_by: Mapped[str] = mapped_column(String(100), nullable=False, default="Admin")


class StudyProtocol(TenantScoped, Base):
    __tablename__ = "study_protocols"

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    version: Mapped[str] = mapped_column(String(20), nullable=False, default="1.0")
    created_by: Mapped[str] = mapped_column(String(100), nullable=False, default="Admin")
