"""Venus — drawing backend.

Stores user-owned projects (JSON scene documents) and uploaded images
behind username/password accounts and stateless JWT auth.
"""

__version__ = "0.1.0"
