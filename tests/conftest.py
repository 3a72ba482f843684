import os

# Settings are read when src.quickcourt.config is first imported.
os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-for-quickcourt-media")
