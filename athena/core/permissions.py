"""
Role and permission model for the warehouse UI.

A user's permissions are a flat mapping of ``<feature>_<action>`` flags
(e.g. ``dailybon_edit``). Each role ships a default mapping; an admin can
override individual flags per user.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

ROLE_ADMIN = 'Admin'
ROLE_MANAGER = 'Manager'
ROLE_TEKNISI = 'Teknisi'
ROLE_VIEWER = 'Viewer'

ROLE_CHOICES = [
    (ROLE_ADMIN, 'Admin'),
    (ROLE_MANAGER, 'Manager'),
    (ROLE_TEKNISI, 'Teknisi'),
    (ROLE_VIEWER, 'Viewer'),
]

# Feature -> actions it supports
FEATURE_ACTIONS = {
    'dashboard': ('view', 'edit'),
    'reportstock': ('view', 'edit', 'delete'),
    'bonpds': ('view', 'edit', 'delete'),
    'dailybon': ('view', 'edit', 'delete'),
    'userrole': ('view', 'edit', 'delete'),
    'msk': ('view', 'edit', 'delete'),
    'nr': ('view', 'edit', 'delete'),
    'tsn': ('view', 'edit', 'delete'),
    'tsp': ('view', 'edit', 'delete'),
    'sob': ('view', 'edit', 'delete'),
}

PERMISSION_KEYS = [
    f'{feature}_{action}'
    for feature, actions in FEATURE_ACTIONS.items()
    for action in actions
]


def _grant(*keys):
    return {key: key in keys for key in PERMISSION_KEYS}


ROLE_PERMISSIONS = {
    ROLE_ADMIN: _grant(*PERMISSION_KEYS),
    ROLE_MANAGER: _grant(
        'dashboard_view', 'dashboard_edit',
        'reportstock_view', 'reportstock_edit',
        'bonpds_view', 'bonpds_edit',
        'dailybon_view',
        'userrole_view', 'userrole_edit',
        'msk_view', 'msk_edit',
        'nr_view', 'nr_edit',
        'tsn_view', 'tsn_edit',
        'tsp_view', 'tsp_edit',
        'sob_view', 'sob_edit',
    ),
    ROLE_TEKNISI: _grant(
        'dashboard_view',
        'reportstock_view',
        'dailybon_view', 'dailybon_edit',
        'userrole_view',
        'nr_view', 'tsn_view', 'tsp_view', 'sob_view',
    ),
    ROLE_VIEWER: _grant('dashboard_view', 'userrole_view'),
}

# Sidebar entries in display order: (path, label, required flag)
NAVIGATION = [
    ('/', 'Dashboard', 'dashboard_view'),
    ('/report-stock', 'Report Stock', 'reportstock_view'),
    ('/daily-bon', 'Daily Bon', 'dailybon_view'),
    ('/bon-pds', 'Bon PDS', 'bonpds_view'),
    ('/msk', 'MSK', 'msk_view'),
    ('/sob', 'SOB', 'sob_view'),
    ('/nr', 'NR', 'nr_view'),
    ('/tsn', 'TSN', 'tsn_view'),
    ('/tsp', 'TSP', 'tsp_view'),
    ('/user-roles', 'User Role', 'userrole_view'),
]


def default_permissions(role):
    """Return a fresh copy of the default permission map for ``role``."""
    try:
        return dict(ROLE_PERMISSIONS[role])
    except KeyError:
        raise ValueError(f"Unknown role: {role}")


def normalize_permissions(data):
    """
    Validate a (possibly partial) permission mapping and return the full map.

    Missing flags default to False. Raises ValueError on unknown keys or
    non-boolean values.
    """
    if not isinstance(data, dict):
        raise ValueError("Permissions must be an object of flag -> boolean")
    unknown = sorted(set(data) - set(PERMISSION_KEYS))
    if unknown:
        raise ValueError(f"Unknown permission flags: {', '.join(unknown)}")
    normalized = {}
    for key in PERMISSION_KEYS:
        value = data.get(key, False)
        if not isinstance(value, bool):
            raise ValueError(f"Permission '{key}' must be true or false")
        normalized[key] = value
    return normalized


def has_permission(user, feature, action):
    """True when ``user`` holds the ``<feature>_<action>`` flag."""
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    permissions = getattr(user, 'permissions', None) or {}
    return bool(permissions.get(f'{feature}_{action}', False))


def is_admin(user):
    return bool(user and user.is_authenticated and (user.is_superuser or user.role == ROLE_ADMIN))


def navigation_for(user):
    """Menu entries visible to ``user``, in sidebar order."""
    entries = []
    for href, label, flag in NAVIGATION:
        feature, action = flag.rsplit('_', 1)
        if has_permission(user, feature, action):
            entries.append({'href': href, 'label': label, 'permission': flag})
    return entries


METHOD_ACTIONS = {
    'POST': 'edit',
    'PUT': 'edit',
    'PATCH': 'edit',
    'DELETE': 'delete',
}


def action_for_method(method):
    if method in SAFE_METHODS:
        return 'view'
    return METHOD_ACTIONS.get(method, 'edit')


def FeaturePermission(feature):
    """
    Build a DRF permission class gating a view on one feature.

    Safe methods need ``<feature>_view``, writes need ``<feature>_edit``
    and DELETE needs ``<feature>_delete``.
    """

    class _FeaturePermission(BasePermission):
        message = f"You do not have permission to perform this action on {feature}."

        def has_permission(self, request, view):
            return has_permission(request.user, feature, action_for_method(request.method))

    _FeaturePermission.__name__ = f'{feature.capitalize()}Permission'
    return _FeaturePermission
