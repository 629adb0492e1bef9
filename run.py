#!/usr/bin/env python3
"""
Run script for the AEMOZ draw service
"""
import uvicorn

from aemoz.config.settings import settings
from aemoz.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
