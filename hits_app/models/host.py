from sqlalchemy import Column, Integer, String
from hits_app.database.connection import Base


class Host(Base):
    """A host name that hits are recorded against"""
    __tablename__ = "hosts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    host = Column(String(255), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Host id={self.id} host={self.host!r}>"
