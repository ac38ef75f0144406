import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

# Only required once hotel_booking.db.engine is imported
DATABASE_URL = os.getenv("DATABASE_URL")

SCHEMA = "booking"

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))

# Default deadline for a single reservation operation; 0 disables it
BOOKING_OPERATION_TIMEOUT_SECONDS = float(os.getenv("BOOKING_OPERATION_TIMEOUT_SECONDS", "10"))
