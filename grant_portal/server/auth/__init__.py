"""
Authentication for the Grant Portal API.

- supabase_client: async client for the Supabase Auth REST API
- sessions: server-side session store and cookie helpers
- dependencies: ``CurrentUser`` resolution for protected routes
"""
