from sqlalchemy import JSON, Column, Text
from app.database import Base


class Article(Base):
    __tablename__ = "articles"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(Text)
    tags = Column(JSON, default=list)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
