"""Online bookstore storefront and back office API"""
