"""Back office analytics models"""

from decimal import Decimal

from pydantic import BaseModel


class ProductRevenue(BaseModel):
    product_id: str
    title: str
    units_sold: int
    revenue: Decimal


class AnalyticsSummary(BaseModel):
    total_revenue: Decimal
    total_orders: int
    total_products: int
    total_customers: int
    top_products: list[ProductRevenue]
