"""
asgi.py -- Application assembly for the portfolio API.

Joins the JSON API with the public image directory into the single ASGI app
that gets served. api/main.py knows nothing about static files; uploaded
images written by portfolio.media.MediaStore are served from here under the
configured prefix (default /uploads).

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from pathlib import Path

from fastapi.staticfiles import StaticFiles

from api.main import app
from core.config import get_settings

_settings = get_settings()

# The directory is created here as well as by MediaStore so the mount works
# before the first upload.
Path(_settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(_settings.upload_url_prefix, StaticFiles(directory=_settings.upload_dir), name="uploads")
