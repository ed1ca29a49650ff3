"""
Version 1 of the API.

Breaking changes to the rental contract should be introduced in a new
version subpackage to keep existing gateway clients working.
"""
