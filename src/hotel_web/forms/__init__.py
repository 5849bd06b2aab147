"""Form validation for the web pages.

Each validator returns a mapping of field name to message; an empty mapping
means the submission is valid and can be sent to the backend.
"""
