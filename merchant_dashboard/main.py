"""
FastAPI Application

Main entry point for the Merchant Dashboard API.
"""

from merchant_dashboard.config import get_settings
from merchant_dashboard.serving.api import create_api_app

settings = get_settings()

app = create_api_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
