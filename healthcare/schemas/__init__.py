"""Pydantic schemas shared by the service, the HTTP routes and the page cache."""
