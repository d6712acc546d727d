from typing import Any

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from anime_search.database import Base


class AnimeInfo(Base):
    """Anime metadata record served by the listing and search endpoints."""

    __tablename__ = "anime_info"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), default="")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tag: Mapped[str | None] = mapped_column(String(255), nullable=True)  # comma-separated
    country: Mapped[str | None] = mapped_column(String(50), nullable=True)  # "japan", "china", ...
    status: Mapped[int | None] = mapped_column(Integer, nullable=True)
    like_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    __table_args__ = (
        Index("idx_anime_info_country", "country"),
        Index("idx_anime_info_like_count", "like_count"),
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the column values as a plain dict."""
        return {column.key: getattr(self, column.key) for column in self.__table__.columns}
