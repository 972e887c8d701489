#!/usr/bin/env python
import os
import sys

# Add backend directory to path
sys.path.insert(0, os.path.dirname(__file__))

if __name__ == '__main__':
    import uvicorn
    from stockroom.core.config import settings

    uvicorn.run(
        "stockroom.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False
    )
