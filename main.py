"""
Run the Contract Insight API with uvicorn
"""

import os
import uvicorn
from app.core.config import settings

if __name__ == "__main__":
    # Hosting platforms inject PORT; reload needs an import string, not an app object
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=int(os.getenv("PORT", settings.PORT)),
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
