"""
API Routes Package

This module consolidates the JSON API routes of the storefront.
"""

from fastapi import APIRouter

from . import orders

# Create main router
router = APIRouter()

router.include_router(orders.router, prefix="/orders", tags=["orders"])

# Export for use in main application
__all__ = ["router"]
