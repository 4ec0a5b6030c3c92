"""
Django settings package.

base.py holds everything shared, including the inventory API and gateway
configuration; dev.py, test.py and prod.py override it per environment.
Structured logging lives in logging.py.
"""
