"""
asgi.py -- Application assembly for Vendorify.

The only module that imports from both api/ and web/. api/main.py builds
the FastAPI app (middleware, JSON routes, lifespan); web/routes.py holds the
HTML routes. Neither imports the other.

Run with:  uvicorn asgi:app --reload
"""

from api.main import app
from web.routes import router as web_router

app.include_router(web_router, tags=["Web UI"])
