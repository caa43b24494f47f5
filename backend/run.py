"""Run script with proper environment loading"""
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

from dotenv import load_dotenv

load_dotenv(BASE_DIR.parent / ".env", override=True)

if __name__ == "__main__":
    import uvicorn
    from blogdemo.core.config import get_settings

    settings = get_settings()

    from blogdemo.main import app

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )
