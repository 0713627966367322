"""Process-wide backend handles: Appwrite client and Redis."""
