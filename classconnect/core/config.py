from pydantic_settings import BaseSettings
from pymongo import MongoClient
import logging
import os

class Settings(BaseSettings):
    MONGO_URI: str
    SECRET_KEY: str
    DB_NAME: str = "class_connect"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 4
    CACHE_TTL_SECONDS: int = 300  # Freshness window for cached records
    MAX_REVIEW_WORDS: int = 400

    class Config:
        env_file = ".env"

settings = Settings()

# MongoDB client and database
client = MongoClient(settings.MONGO_URI)
db = client[settings.DB_NAME]

# Configure basic logging to logs directory
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
os.makedirs(LOG_DIR, exist_ok=True)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler(os.path.join(LOG_DIR, "app.log")),
        logging.StreamHandler(),
    ],
)
