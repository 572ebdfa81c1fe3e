"""
FastAPI application layer for the IPFS pin relay.

Exposes HTTP endpoints that accept a JSON object or a file, hand it to the
pinning layer, and return the content identifier assigned by the provider.
"""

API_VERSION = "0.0.1"
