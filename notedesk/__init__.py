"""
Notedesk.

- backend/: API, services, repositories, database models, configuration
"""
