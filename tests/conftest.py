from __future__ import annotations

import os

# Settings() is instantiated at import time of foodiefind.app.config
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
