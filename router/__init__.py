"""
HTTP routers for the Manufacturer Search Engine
"""
