"""
Rate-limited document submission client.
"""
