"""
Console services: job loading, user directory, sessions and the HTTP app.
"""
