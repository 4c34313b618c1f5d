"""
asgi.py -- Production entry point for Stockroom.

This is the ONLY module that builds Settings from the environment. Everything
else receives configuration through create_app().

Run with:  uvicorn asgi:app --reload
"""

from api.main import create_app
from core.config import get_settings

app = create_app(get_settings())
