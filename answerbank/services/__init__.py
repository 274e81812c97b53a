"""
Response library services.
"""
