#import all models so SQLAlchemy registers them in Base.metadata

from bookshop.data.models.user import UserModel
from bookshop.data.models.category import CategoryModel
from bookshop.data.models.book import BookModel
from bookshop.data.models.cart import CartModel

__all__ = ["UserModel", "CategoryModel", "BookModel", "CartModel"]
