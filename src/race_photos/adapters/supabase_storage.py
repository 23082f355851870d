"""Supabase storage adapter for public object URLs."""

from dataclasses import dataclass

from supabase import Client

from race_photos.services.gallery import ObjectStorage


@dataclass
class SupabaseStorage(ObjectStorage):
    """Resolves paths in a public Supabase storage bucket."""

    client: Client
    bucket: str

    def public_url(self, path: str) -> str:
        """Return the public URL of a stored object."""
        return self.client.storage.from_(self.bucket).get_public_url(path)
