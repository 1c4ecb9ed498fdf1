"""
Document Tables.

============================================================
TABLES
============================================================
- documents: opaque values keyed by document id
- design_documents: serialized design documents, with the
  signature and timestamp lifted into columns for inspection

Both carry created_at / updated_at, set by the database.

============================================================
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, LargeBinary, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base of the store tables."""


class Timestamped:
    """created_at / updated_at columns maintained by the database."""
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )


class DocumentRecord(Base, Timestamped):
    """One stored document."""
    
    __tablename__ = "documents"
    
    key: Mapped[str] = mapped_column(
        String(250),
        primary_key=True,
        comment="Document identifier"
    )
    
    value: Mapped[bytes] = mapped_column(
        LargeBinary,
        nullable=False,
        comment="Opaque document body"
    )
    
    def __repr__(self) -> str:
        return f"<DocumentRecord(key={self.key!r}, size={len(self.value or b'')})>"


class DesignDocumentRecord(Base, Timestamped):
    """One published design document."""
    
    __tablename__ = "design_documents"
    
    document_id: Mapped[str] = mapped_column(
        String(250),
        primary_key=True,
        comment="Design document identifier"
    )
    
    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="JSON payload"
    )
    
    signature: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        comment="Content digest of the view sources"
    )
    
    source_timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        comment="Newest view source mtime (epoch seconds)"
    )
    
    def __repr__(self) -> str:
        return (
            f"<DesignDocumentRecord(document_id={self.document_id!r}, "
            f"signature={self.signature!r}, source_timestamp={self.source_timestamp})>"
        )
