import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("CAMPAIGN_API_BASE_URL", "https://campaigns.example.test")
os.environ.setdefault("CAMPAIGN_API_TOKEN", "test_token")
os.environ.setdefault("CAMPAIGN_API_TIMEOUT_SECONDS", "5")
os.environ.setdefault("SEQUENCE_DEFAULT_GAP_DAYS", "3")
os.environ.setdefault("DEFAULT_SEND_TIMEZONE", "America/New_York")
