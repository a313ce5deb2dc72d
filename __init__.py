"""
Crafter Auth Gateway

Delegates login plugin identity operations (sign-in, sign-up, password reset
and user lookup) to the Crafter CMS authentication API. The gateway is
unlocked by a one-time license activation that establishes the website
identity used for every subsequent request.
"""

__version__ = "1.0.0"
