"""
Marketplace Dispatch - job matching, push notifications and chat room
maintenance for a contractor marketplace.
"""
__version__ = "1.0.0"
