"""
Identity subsystem.

Components:
- auth_models.py: User and the persisted user/token pair
- auth_api.py: HTTP sign-in / sign-up client
- credentials.py: JSON file credential store
- session.py: identity lifecycle (hydrate, sign in/up/out)
"""
