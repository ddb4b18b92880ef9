# backend/extensions.py

from supabase import create_client

from errors import ConfigurationError


class SupabaseClient:
    def __init__(self):
        self.client = None

    def init_app(self, app):
        url = app.config.get("SUPABASE_URL")
        key = app.config.get("SUPABASE_KEY")
        if not url or not key:
            raise ConfigurationError("Missing Supabase config")
        self.client = create_client(url, key)
        app.extensions["supabase"] = self

    def __getattr__(self, name):
        """Forward attribute access to the real Supabase client once initialized."""
        if self.client is None:
            raise RuntimeError("Supabase client not initialized yet")
        return getattr(self.client, name)

supabase_client = SupabaseClient()
