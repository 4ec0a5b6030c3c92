"""
Products module - Product registry management.

This module handles:
- Product registry derived from license totals and license products
- Adding, renaming and removing products
- Purchased license totals per product
"""
