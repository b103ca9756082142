import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for MailWave.
    Everything is read from the environment once, at import time.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Document store
    # 'mongo' talks to MONGODB_URI, 'memory' keeps everything in-process
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'mongo')
    MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017/newsletter')
    # Falls back to the database named in MONGODB_URI when unset
    MONGODB_DB = os.getenv('MONGODB_DB')
    MONGODB_SELECTION_TIMEOUT_MS = int(os.getenv('MONGODB_SELECTION_TIMEOUT_MS', '5000'))

    # Collection names
    SUBSCRIBERS_COLLECTION = "subscribers"
    POSTS_COLLECTION = "posts"
    LOGS_COLLECTION = "app_logs"

    # Client UI
    API_URL = os.getenv('API_URL', 'http://localhost:5000/api')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', '10'))

    # Server
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '5000'))
