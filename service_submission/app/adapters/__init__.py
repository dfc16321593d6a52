"""
Adapters for delivering submissions to the remote endpoint.
"""
