"""
Document-side tables: versioned documents and their suggestions.

A document id may appear on many rows; each row is one version, told
apart by createdAt. Suggestions point at one specific version.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    ForeignKeyConstraint,
    String,
    Text,
    false,
)

from chatdb.models.base import Base, CreatedAtMixin, new_uuid, utc_now_iso


class Document(Base):
    """
    One version of a document.

    Attributes:
        id: Document identifier, shared by all versions
        createdAt: Version timestamp, part of the primary key
        title: Document title
        content: Body text (nullable)
        kind: Block kind tag ("text", "code", "image", "sheet")
        userId: Author
    """

    __tablename__ = "Document"

    id = Column(String, primary_key=True, default=new_uuid)
    createdAt = Column(String, primary_key=True, default=utc_now_iso)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    kind = Column(String, nullable=False, default="text")
    userId = Column(String, ForeignKey("User.id"), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "kind IN ('text', 'code', 'image', 'sheet')",
            name="document_kind_check",
        ),
    )

    def __repr__(self) -> str:
        return f"Document(id={self.id!r}, createdAt={self.createdAt!r})"


class Suggestion(Base, CreatedAtMixin):
    """
    Edit suggestion attached to a specific document version.
    """

    __tablename__ = "Suggestion"

    id = Column(String, primary_key=True, default=new_uuid)
    documentId = Column(String, nullable=False)
    documentCreatedAt = Column(String, nullable=False)
    originalText = Column(Text, nullable=False)
    suggestedText = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    isResolved = Column(Boolean, nullable=False, default=False, server_default=false())
    userId = Column(String, ForeignKey("User.id"), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["documentId", "documentCreatedAt"],
            ["Document.id", "Document.createdAt"],
        ),
    )
