import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # Provide a safe development fallback to avoid 500s when SECRET_KEY is missing.
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-me'
    DATABASE_URL = os.getenv('DATABASE_URL')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL or 'sqlite:///techfest.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'true').lower() in ('1', 'true', 'yes')
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    REMEMBER_COOKIE_SECURE = SESSION_COOKIE_SECURE
    REMEMBER_COOKIE_HTTPONLY = True
    WTF_CSRF_TIME_LIMIT = None
    # Clients send the token from /auth/csrf in this header
    WTF_CSRF_HEADERS = ['X-CSRFToken', 'X-CSRF-Token']

    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')

    # Google federated sign-in
    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')

    # Blob storage. None means <package>/static/uploads.
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER')
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    # Leave headroom above the image limit so oversize uploads get a clean 400
    MAX_CONTENT_LENGTH = 6 * 1024 * 1024

    COLLEGE_NAME = os.getenv('COLLEGE_NAME', 'SPK COLLEGE')
    ANNOUNCEMENT_POLL_SECONDS = float(os.getenv('ANNOUNCEMENT_POLL_SECONDS', '3'))
    # None streams until the client disconnects
    ANNOUNCEMENT_STREAM_MAX_POLLS = None
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
