"""Single-owner resource authorization.

Learn: most queries already filter on owner_id, so a foreign row simply
isn't found. ensure_owner covers the other case, a row loaded by some
other key (an image id, a project id referenced by an upload), and
raises OwnershipError, which the API renders exactly like a 404. A caller
can't tell "not yours" from "doesn't exist".
"""

from typing import Any, Optional, TypeVar

from venus.auth.errors import OwnershipError

T = TypeVar("T")


def authorize(resolved_id: int, owner_id: Optional[int]) -> bool:
    """True when `resolved_id` owns a resource owned by `owner_id`."""
    return owner_id is not None and resolved_id == owner_id


def ensure_owner(resolved_id: int, resource: Optional[T], resource_name: str) -> T:
    """Return `resource` if `resolved_id` owns it, else raise OwnershipError."""
    owner_id: Any = getattr(resource, "owner_id", None)
    if resource is None or not authorize(resolved_id, owner_id):
        raise OwnershipError(resource_name)
    return resource
