"""
Launch script for the ticket scanning service
"""
import sys
from pathlib import Path

# Add the project root to PYTHONPATH
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    import uvicorn
    from app.config import get_settings
    from app.core.logging import setup_logging

    settings = get_settings()

    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT, is_debug=settings.DEBUG)

    print(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"📡 Server: http://{settings.HOST}:{settings.PORT}")
    print(f"📚 Docs: http://{settings.HOST}:{settings.PORT}/docs")
    print(f"🤖 AI provider: {settings.AI_PROVIDER.value}")
    print(f"🔎 OCR corroboration: {'on' if settings.OCR_ENABLED else 'off'}")
    print(f"🔧 Debug mode: {settings.DEBUG}")
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
