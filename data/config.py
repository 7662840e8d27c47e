import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Bot configuration for the What The Food admin board
# Secrets must be provided via .env; no hardcoded defaults
BOT_TOKEN = os.getenv("BOT_TOKEN")

# Parse admin IDs from environment variable
admin_ids_str = os.getenv("ADMIN_IDS", "")
ADMIN_IDS = [int(admin_id.strip()) for admin_id in admin_ids_str.split(",") if admin_id.strip()]

# Order store (backend) configuration
BASE_URL = os.getenv("ORDERS_API_URL", "http://localhost:5000")
ORDERS_PATH = os.getenv("ORDERS_PATH", "/getorders")
ORDERS_TIMEOUT = float(os.getenv("ORDERS_TIMEOUT", "15"))

# Reference time zone for date filtering and display, as a fixed UTC offset
REFERENCE_TZ_OFFSET_HOURS = float(os.getenv("REFERENCE_TZ_OFFSET_HOURS", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
