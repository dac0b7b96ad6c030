"""
Password hashing, JWT issuing/decoding and the FastAPI auth dependencies.
"""
