"""HTTP API for dry-run prompt and payload construction"""
