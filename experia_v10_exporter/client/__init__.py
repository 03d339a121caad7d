"""
Client package for the Experia Box V10 exporter.

- http.py: Device session, cookie store and transport
- auth.py: Login handshake and logout
- fetcher.py: Priming and data page requests per domain
- parser.py: XML record decoding
- main.py: Pipeline orchestration
"""

from .main import ExperiaV10Client

__all__ = ["ExperiaV10Client"]
