from app.models.product import Product
from app.models.article import Article

__all__ = ["Product", "Article"]
