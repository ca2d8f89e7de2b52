import os
from datetime import timedelta

# Load .env from project root so local development MONGO_URI is picked up
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-this-jwt-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "12")))

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "codetasks")

    # Attachments live in S3; leave the bucket empty to skip remote deletes
    AWS_REGION = os.environ.get("AWS_REGION", "ap-southeast-1")
    AWS_S3_BUCKET = os.environ.get("AWS_S3_BUCKET", "")

    TASKS_PAGE_LIMIT = int(os.environ.get("TASKS_PAGE_LIMIT", "25"))
    TASKS_MAX_PAGE_LIMIT = int(os.environ.get("TASKS_MAX_PAGE_LIMIT", "100"))

    # Comment timestamps are stored as UTC shifted by this many hours
    TIMESTAMP_OFFSET_HOURS = int(os.environ.get("TIMESTAMP_OFFSET_HOURS", "7"))

    ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    JSON_SORT_KEYS = False
