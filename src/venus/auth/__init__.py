"""Authentication and ownership authorization.

Learn: every protected request goes through the same pipeline:
1. extract a bearer token (Authorization header, then `token` cookie)
2. decode it (signature + expiry) into the account id
3. scope every store query by that id, and re-check ownership for
   anything loaded by a secondary key

Failures never say *why*: a bad token is a 401, someone else's
resource is a 404.
"""
