#!/usr/bin/env python3
"""
Run script for the Sheeter Counsel AI backend
"""
import uvicorn

from sheeter_counsel.config.settings import settings
from sheeter_counsel.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
