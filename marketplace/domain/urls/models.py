from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.db import Base


class Url(Base):
    __tablename__ = "urls"
    __table_args__ = (
        UniqueConstraint("tenant_id", "language_id", "slug", name="uq_url_slug_language_tenant"),
        # At most one default per (element, language) scope.
        Index(
            "uq_url_default_scope",
            "tenant_id",
            "element_type",
            "element_id",
            "language_id",
            unique=True,
            sqlite_where=text("is_default"),
            postgresql_where=text("is_default"),
        ),
        Index("ix_urls_element", "tenant_id", "element_type", "element_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    element_type: Mapped[str] = mapped_column(String(64), nullable=False)
    element_id: Mapped[str] = mapped_column(String(64), nullable=False)
    language_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("languages.id", ondelete="RESTRICT"), nullable=False
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped["DateTime"] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    language = relationship("Language", lazy="selectin")
