"""
rate_api - HTTP surface of the rate resolution engine
"""
