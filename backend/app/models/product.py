from sqlalchemy import Column, Float, Text
from app.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Text)
    price = Column(Float)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
