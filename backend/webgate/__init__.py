"""
webgate

Membership requests, member/operator authentication and editable page
content behind one FastAPI service.
"""
__version__ = "1.0.0"
