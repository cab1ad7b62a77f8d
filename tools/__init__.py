"""tools

Clients for the external systems the comparison talks to.
"""
