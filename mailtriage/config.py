import os
from dotenv import load_dotenv
from mailtriage.lib.shared.models.util import Environment

load_dotenv()

class DashboardConfig:
    def __init__(self):
        # Determine Environment
        env_str = os.getenv("MAILTRIAGE_ENV", "dev").lower()
        try:
            self.env = Environment(env_str)
        except ValueError:
            self.env = Environment.DEV

        self.token_secret = os.getenv("MAILTRIAGE_TOKEN_SECRET")
        self.token_ttl_hours = int(os.getenv("MAILTRIAGE_TOKEN_TTL_HOURS", 24))
        self.require_auth = os.getenv("MAILTRIAGE_REQUIRE_AUTH", "false").lower() == "true"
        self.log_level = os.getenv("MAILTRIAGE_LOG_LEVEL", "INFO").upper()

        self.chroma_server_host = os.getenv("CHROMA_SERVER_HOST")
        self.chroma_server_port = int(os.getenv("CHROMA_SERVER_PORT", 8000))
        self.collection_name = os.getenv("MAILTRIAGE_COLLECTION", "filtered_emails")
        self.mock_data_path = os.getenv("MOCK_DATA_PATH", "mailtriage/data/mock_store.json")

        # Dashboard (UI) settings
        self.api_url = os.getenv("API_URL", "http://localhost:8000")
        self.prefs_path = os.path.expanduser(os.getenv("MAILTRIAGE_PREFS_PATH", "~/.mailtriage/preferences.json"))
        self.viewport_width = int(os.getenv("MAILTRIAGE_VIEWPORT_WIDTH", 1280))

        # Environment Configuration
        if self.env == Environment.TEST:
            self.chroma_db_path = "./test_chroma_db"
            self.use_mock_data = True
        elif self.env == Environment.DEV:
            self.chroma_db_path = os.getenv("CHROMA_DB_PATH", "./chroma_db")
            self.use_mock_data = os.getenv("USE_MOCK_DATA", "false").lower() == "true"
        else: # PROD
            self.chroma_db_path = os.getenv("CHROMA_DB_PATH", "./chroma_db")
            self.use_mock_data = False
