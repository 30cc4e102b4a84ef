# backend/modules/kds/routes/__init__.py

"""
Kitchen Display System routes.
"""

from .kds_routes import router

__all__ = ["router"]
