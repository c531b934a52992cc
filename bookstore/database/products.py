"""In-memory book catalog"""

import uuid
from decimal import Decimal
from typing import Iterable, Optional

from pricing import ProductPrices

from ..models.product import Book, BookCreate, BookUpdate
from .transaction import transaction


def _seed_catalog() -> dict[str, Book]:
    books = [
        Book(
            id="book-001",
            title="The God of Small Things",
            author="Arundhati Roy",
            description="Booker Prize winning novel set in Kerala.",
            category="fiction",
            price=Decimal("499.00"),
            discounted_price=Decimal("399.00"),
            ebook_price=Decimal("249.00"),
            stock=40,
        ),
        Book(
            id="book-002",
            title="Midnight's Children",
            author="Salman Rushdie",
            description="A child born at the stroke of India's independence.",
            category="fiction",
            price=Decimal("350.00"),
            ebook_price=Decimal("299.00"),
            ebook_discounted=Decimal("199.00"),
            stock=25,
        ),
        Book(
            id="book-003",
            title="Sapiens",
            author="Yuval Noah Harari",
            description="A brief history of humankind.",
            category="history",
            price=Decimal("599.00"),
            discounted_price=Decimal("449.00"),
            ebook_price=Decimal("299.00"),
            ebook_discounted=Decimal("249.00"),
            stock=60,
        ),
        Book(
            id="book-004",
            title="Wings of Fire",
            author="A. P. J. Abdul Kalam",
            description="An autobiography.",
            category="biography",
            price=Decimal("299.00"),
            stock=80,
        ),
        Book(
            id="book-005",
            title="Atomic Habits",
            author="James Clear",
            description="An easy and proven way to build good habits.",
            category="self-help",
            price=Decimal("799.00"),
            discounted_price=Decimal("549.00"),
            ebook_price=Decimal("399.00"),
            stock=100,
        ),
        Book(
            id="book-006",
            title="The Guide",
            author="R. K. Narayan",
            description="A tour guide turned holy man in Malgudi.",
            category="fiction",
            price=Decimal("250.00"),
            stock=2,
        ),
        Book(
            id="book-007",
            title="Clean Code",
            author="Robert C. Martin",
            description="A handbook of agile software craftsmanship.",
            category="technology",
            price=Decimal("1299.00"),
            discounted_price=Decimal("999.00"),
            ebook_price=Decimal("699.00"),
            ebook_discounted=Decimal("599.00"),
            stock=15,
        ),
        Book(
            id="book-008",
            title="Discovery of India",
            author="Jawaharlal Nehru",
            description="Out of print hardcover, e-book edition only.",
            category="history",
            price=Decimal("450.00"),
            ebook_price=Decimal("149.00"),
            stock=0,
        ),
    ]
    return {book.id: book for book in books}


class ProductDatabase:
    """In-memory book catalog"""

    def __init__(self):
        self.products: dict[str, Book] = _seed_catalog()

    def reset(self) -> None:
        """Restore the seed catalog"""
        with transaction():
            self.products = _seed_catalog()

    def get_product(self, product_id: str) -> Optional[Book]:
        """Get a book by ID"""
        return self.products.get(product_id)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        in_stock_only: bool = False,
        ebooks_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Book], int]:
        """
        Search books with filters.

        Price filters apply to the price a printed copy sells at.

        Returns:
            Tuple of (matching books, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                b for b in results
                if query_lower in b.title.lower()
                or query_lower in b.author.lower()
                or query_lower in b.description.lower()
            ]

        if category:
            results = [b for b in results if b.category == category.lower()]

        def selling_price(book: Book) -> Decimal:
            return book.discounted_price if book.discounted_price is not None else book.price

        if min_price is not None:
            results = [b for b in results if selling_price(b) >= min_price]
        if max_price is not None:
            results = [b for b in results if selling_price(b) <= max_price]

        if in_stock_only:
            results = [b for b in results if b.in_stock]

        if ebooks_only:
            results = [b for b in results if b.has_ebook]

        total = len(results)
        results = results[offset : offset + limit]

        return results, total

    def get_all_products(self) -> list[Book]:
        """Get all books"""
        return list(self.products.values())

    def list_categories(self) -> list[str]:
        return sorted({b.category for b in self.products.values()})

    def prices_for(self, product_ids: Iterable[str]) -> dict[str, ProductPrices]:
        """Price snapshot for the given books; unknown IDs are left out"""
        return {
            pid: self.products[pid].to_prices()
            for pid in set(product_ids)
            if pid in self.products
        }

    def create_product(self, data: BookCreate) -> Book:
        book = Book(id=f"book-{uuid.uuid4().hex[:8]}", **data.model_dump())
        book.category = book.category.lower()
        with transaction():
            self.products[book.id] = book
        return book

    def update_product(self, product_id: str, data: BookUpdate) -> Optional[Book]:
        with transaction():
            book = self.products.get(product_id)
            if not book:
                return None

            changes = data.model_dump(exclude_unset=True)
            if changes.get("category"):
                changes["category"] = changes["category"].lower()
            updated = book.model_copy(update=changes)
            self.products[product_id] = Book.model_validate(updated.model_dump())
            return self.products[product_id]

    def delete_product(self, product_id: str) -> bool:
        with transaction():
            if product_id in self.products:
                del self.products[product_id]
                return True
            return False

    def update_stock(self, product_id: str, quantity_change: int) -> bool:
        """
        Update book stock.

        Args:
            product_id: Book to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        with transaction():
            book = self.products.get(product_id)
            if not book:
                return False

            new_quantity = book.stock + quantity_change
            if new_quantity < 0:
                return False

            book.stock = new_quantity
            return True


# Singleton instance
product_db = ProductDatabase()
