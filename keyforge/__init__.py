"""keyforge - Key Material Toolbox.

Cryptographic key tooling for desktop and service front ends:
- RSA, elliptic curve and Edwards curve key generation
- PKCS#1 / PKCS#8 transcoding between PEM and DER
- RSA encryption with PKCS#1 v1.5 or OAEP padding
- JSON Web Key generation and JWS signing
"""

__version__ = "0.3.0"
__author__ = "keyforge contributors"
