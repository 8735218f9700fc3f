"""
API

JSON endpoints for memos and the translation of core error kinds into HTTP
responses.
"""
