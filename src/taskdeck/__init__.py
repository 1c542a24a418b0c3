"""taskdeck: a console client for a remote to-do API."""
