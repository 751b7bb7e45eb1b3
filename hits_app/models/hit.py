from sqlalchemy import Column, Integer, String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from hits_app.database.connection import Base


class Hit(Base):
    """
    Daily hit count for one (host, path, http status) combination.

    path can be up to 1024 characters, too long for a sane unique index,
    so the index covers path_hash (a SHA-1 of path) instead.
    path_hash and the date-only hit_on are filled in by HitValidator.
    """
    __tablename__ = "hits"
    __table_args__ = (
        UniqueConstraint(
            "host_id", "path_hash", "http_status", "hit_on",
            name="uq_hits_host_path_hash_status_hit_on"
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    host_id = Column(Integer, ForeignKey("hosts.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(String(1024), nullable=False)
    path_hash = Column(String(40), nullable=False)
    http_status = Column(String(3), nullable=False)
    count = Column(Integer, nullable=False)
    hit_on = Column(Date, nullable=False, index=True)

    # many-to-one only, hosts don't track their hits
    host = relationship("Host")

    def __repr__(self) -> str:
        return (
            f"<Hit id={self.id} path={self.path!r} http_status={self.http_status!r} "
            f"hit_on={self.hit_on} count={self.count}>"
        )
