"""
Run the StockPro Technicals server.
"""
import os

# Load environment
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

# Run uvicorn
import uvicorn

from technicals.core.config import settings

if __name__ == "__main__":
    print("Starting StockPro Technicals Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "technicals.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
