"""Supabase table access."""
