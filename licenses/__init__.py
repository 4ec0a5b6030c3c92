"""
Licenses module - License inventory management.

This module handles:
- License entity and the fields edited on the inventory screen
- Expiration and approval status classification
- Grouping of licenses by product with usage accounting
- The gateway to the external license inventory API
"""
