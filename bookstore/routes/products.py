"""Catalog API routes for the bookstore"""

from collections import Counter
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from pricing import OrderStatus

from ..models.product import BestsellerEntry, Book, ProductSearchResponse
from ..models.review import ProductReviews
from ..database.orders import order_db
from ..database.products import product_db
from ..database.reviews import review_db

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search title, author and description"),
    category: Optional[str] = Query(None, description="Filter by category"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price"),
    in_stock_only: bool = Query(False, description="Only show books with printed copies"),
    ebooks_only: bool = Query(False, description="Only show books with an e-book edition"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Search books in the catalog"""
    products, total = product_db.search_products(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock_only,
        ebooks_only=ebooks_only,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/categories", response_model=list[str])
async def list_categories():
    """List all book categories"""
    return product_db.list_categories()


@router.get("/ebooks", response_model=ProductSearchResponse)
async def list_ebooks(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Books available as e-books"""
    products, total = product_db.search_products(ebooks_only=True, limit=limit, offset=offset)
    return ProductSearchResponse(products=products, total=total, limit=limit, offset=offset)


@router.get("/bestsellers", response_model=list[BestsellerEntry])
async def list_bestsellers(limit: int = Query(10, ge=1, le=50)):
    """Books ranked by copies sold across orders that were not cancelled"""
    units: Counter[str] = Counter()
    for order in order_db.list_orders(limit=len(order_db.orders)):
        if order.status == OrderStatus.CANCELLED:
            continue
        for item in order.items:
            units[item.product_id] += item.quantity

    entries = []
    for product_id, sold in units.most_common():
        book = product_db.get_product(product_id)
        if book:
            entries.append(BestsellerEntry(book=book, units_sold=sold))
        if len(entries) >= limit:
            break
    return entries


@router.get("/{product_id}", response_model=Book)
async def get_product(product_id: str):
    """Get a book by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/category/{category}", response_model=ProductSearchResponse)
async def get_products_by_category(
    category: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Get books in a specific category"""
    products, total = product_db.search_products(
        category=category,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{product_id}/reviews", response_model=ProductReviews)
async def get_product_reviews(product_id: str):
    """Published reviews of a book with its average rating"""
    if not product_db.get_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    reviews = review_db.list_reviews(product_id=product_id, visible=True)
    average = round(sum(r.rating for r in reviews) / len(reviews), 2) if reviews else None
    return ProductReviews(
        product_id=product_id,
        average_rating=average,
        review_count=len(reviews),
        reviews=reviews,
    )
