"""Catalog models for the bookstore"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from pricing import ProductPrices


class Book(BaseModel):
    """Book in the catalog"""
    id: str
    title: str
    author: str
    description: str = ""
    category: str
    price: Decimal = Field(gt=0, decimal_places=2)
    discounted_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_discounted: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    stock: int = Field(ge=0, default=0)
    image_url: Optional[str] = None

    class Config:
        from_attributes = True

    @property
    def has_ebook(self) -> bool:
        return self.ebook_price is not None or self.ebook_discounted is not None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def to_prices(self) -> ProductPrices:
        """Price fields used by the pricing engine"""
        return ProductPrices(
            product_id=self.id,
            title=self.title,
            price=self.price,
            discounted_price=self.discounted_price,
            ebook_price=self.ebook_price,
            ebook_discounted=self.ebook_discounted,
            stock=self.stock,
        )


class BookCreate(BaseModel):
    """Admin request to add a book"""
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    description: str = ""
    category: str = Field(min_length=1)
    price: Decimal = Field(gt=0, decimal_places=2)
    discounted_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_discounted: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    stock: int = Field(ge=0, default=0)
    image_url: Optional[str] = None


class BookUpdate(BaseModel):
    """Admin request to change a book; unset fields are left alone"""
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    discounted_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    ebook_discounted: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None

    @field_validator("title", "author", "description", "category", "price", "stock")
    @classmethod
    def reject_null(cls, value):
        # Sale and e-book prices may be cleared with null; these fields may not
        if value is None:
            raise ValueError("cannot be null")
        return value


class StockAdjustment(BaseModel):
    """Positive to add copies, negative to remove"""
    quantity_change: int


class ProductSearchResponse(BaseModel):
    """Response from catalog search"""
    products: list[Book]
    total: int
    limit: int
    offset: int


class BestsellerEntry(BaseModel):
    book: Book
    units_sold: int
