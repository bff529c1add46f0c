"""
MPGS 3-D Secure bridge.

Backend intermediary that forwards the 3DS authentication handshake
(initiate authentication, authenticate payer, retrieve order, authorize/pay)
to a Mastercard Payment Gateway Services style REST API so that the front end
never holds gateway credentials.
"""

__version__ = "1.0.0"
