"""
Shared configuration for Mod Dredger.
All secrets and platform settings are loaded here to avoid duplication.
"""

import os
from dotenv import load_dotenv

# --- LOAD ENV VARS ---
load_dotenv()

# --- DISCOVERY SITE ---
DISCOVERY_SITE = os.getenv('DISCOVERY_SITE', 'https://wewantmods.com').rstrip('/')
CONTENT_ROOT_SEGMENT = os.getenv('CONTENT_ROOT_SEGMENT', 'sims4').strip('/').lower()
GAME_VERSION = 'Sims 4'

# --- PLATFORM SETTINGS ---
CATALOG_URL = os.getenv('CATALOG_URL', 'http://localhost:3000').rstrip('/')
CATALOG_API_TOKEN = os.getenv('CATALOG_API_TOKEN', 'your-token')

BLOB_API_URL = os.getenv('BLOB_API_URL', 'https://blob.vercel-storage.com').rstrip('/')
BLOB_READ_WRITE_TOKEN = os.getenv('BLOB_READ_WRITE_TOKEN', '').strip()
BLOB_PUBLIC_HOST = os.getenv('BLOB_PUBLIC_HOST', 'public.blob.vercel-storage.com').strip().lower()
BLOB_FOLDER = 'mods'

# --- BEHAVIOR ---
DRY_RUN = os.getenv('DRY_RUN', 'true').lower() == 'true'
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
PRIVACY_LEVEL = os.getenv('PRIVACY_LEVEL', 'default').strip().lower()
SHOW_PROGRESS = os.getenv('SHOW_PROGRESS', 'true').lower() == 'true'

# Language filtering (e.g., 'en' or empty to allow all)
LANGUAGE_FILTER = os.getenv('LANGUAGE_FILTER', '').strip().lower()

# Pages visited within this window are not re-scraped unless --force is given
FRESHNESS_DAYS = int(os.getenv('FRESHNESS_DAYS', 90))

# Notifications
NOTIFICATION_WEBHOOK_URL = os.getenv('NOTIFICATION_WEBHOOK_URL', '').strip()

# --- DATA FILES ---
DATA_DIR = os.getenv('DATA_DIR', 'data')
VISITED_FILE = "visited_pages.json"
UNMAPPED_FILE = "unmapped_categories.json"
HISTORY_FILE = "run_history.json"

# --- TUNING CONSTANTS ---
FLUSH_THRESHOLD = 50
HISTORY_LIMIT = 100
SITEMAP_TIMEOUT = 15
PAGE_TIMEOUT = 30
IMAGE_TIMEOUT = 30
CATALOG_TIMEOUT = 20
SHORT_TIMEOUT = 5
MAX_IMAGES_PER_ITEM = 5
MAX_IMAGE_BYTES = 10 * 1024 * 1024
HEADING_LOOKAHEAD = 10
PROGRESS_LOG_EVERY = 5
BLOCKED_BACKOFF_MULTIPLIER = 3
IDENTITY_POOL_SIZE = 3
FACET_SORT_ORDER = 100
