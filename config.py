import os
import logging
from dotenv import load_dotenv

# Load environment variables from the .env file
load_dotenv()

class Config:
    """Flask application configuration"""

    # CORS configuration for the frontend
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',')
        if origin.strip()
    ]

    # Upload limit for outfit photos (bytes)
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_BYTES', str(10 * 1024 * 1024)))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Media type used when an upload does not declare one
    DEFAULT_MIME_TYPE = os.getenv('DEFAULT_MIME_TYPE', 'image/jpeg')

    @staticmethod
    def get_api_key():
        """Reads the Gemini API key at request time, None when it is not configured"""
        return os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_API_KEY') or None

    @staticmethod
    def configure_logging():
        logging.basicConfig(
            level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
            format='%(asctime)s - %(levelname)s - %(message)s'
        )
