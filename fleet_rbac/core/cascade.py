"""Block -> granular permission cascade applied while editing a role."""

from collections.abc import Iterable

from fleet_rbac.core.exceptions import InvalidPermissionException
from fleet_rbac.core.permission_catalog import DEFAULT_CATALOG, PermissionCatalog


def toggle(
    permission: str,
    current: Iterable[str],
    catalog: PermissionCatalog = DEFAULT_CATALOG,
) -> frozenset[str]:
    """
    Enable or disable one permission and cascade the change.

    Enabling a block permission adds every granular permission the catalog
    maps to it. Disabling a block permission removes those granular
    permissions again, except ones still implied by another active block
    permission (disabling ``fleet_view`` keeps ``trailers_view`` while
    ``fleet_admin`` is active).

    Granular permissions toggle on their own without any cascade.

    Args:
        permission: Permission identifier to toggle
        current: Permission identifiers currently enabled
        catalog: Catalog providing the cascade table

    Returns:
        New permission set; ``current`` is left untouched

    Raises:
        InvalidPermissionException: If ``permission`` is not in the catalog
    """
    target = catalog.get(permission)
    if target is None:
        raise InvalidPermissionException([permission])

    permissions = set(current)
    implied = {p.id for p in catalog.granular_implied_by(target)}

    if target.id not in permissions:
        permissions.add(target.id)
        permissions |= implied
        return frozenset(permissions)

    permissions.discard(target.id)
    if implied:
        still_required: set[str] = set()
        for active in permissions:
            still_required |= {p.id for p in catalog.granular_implied_by(active)}
        permissions -= implied - still_required
    return frozenset(permissions)


def apply_toggles(
    permissions: Iterable[str],
    current: Iterable[str] = (),
    catalog: PermissionCatalog = DEFAULT_CATALOG,
) -> frozenset[str]:
    """Fold a sequence of toggles over ``current``, left to right"""
    result = frozenset(current)
    for permission in permissions:
        result = toggle(permission, result, catalog)
    return result
