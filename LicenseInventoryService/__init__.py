"""
License Inventory Service Django project.
"""
