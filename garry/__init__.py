"""
Garry
=====
Client core for the Garry warranty tracker: warranty status evaluation,
API models and the auth/warranty service client.
"""

__version__ = "0.1.0"
