"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskCreate, TaskUpdate)
- task_api.py: HTTP client for the remote task endpoints
- task_session.py: in-memory task list + selection, synchronized with the API
"""
