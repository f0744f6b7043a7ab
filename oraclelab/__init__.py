"""oraclelab: a from-scratch AES-128 engine and ECB oracle attacks.

Research / education only. Do NOT use in production.
"""

__version__ = "0.1.0"
