"""Role set, route table and navigation entries shared by the API and the access gate.

The ROLES tuple is also the source of the store's ``user_role`` enum, so the gate
and the database can never disagree on which labels exist.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

ROLE_OWNER = 'owner'
ROLE_CUSTOMER_SERVICE = 'customer_service'
ROLE_RECEPTIONIST = 'receptionist'
ROLE_SORTER = 'sorter'
ROLE_STOCK_MANAGER = 'stock_manager'
ROLE_SHIPPING_STAFF = 'shipping_staff'

ROLES: Tuple[str, ...] = (
    ROLE_OWNER,
    ROLE_CUSTOMER_SERVICE,
    ROLE_RECEPTIONIST,
    ROLE_SORTER,
    ROLE_STOCK_MANAGER,
    ROLE_SHIPPING_STAFF,
)

DEFAULT_ROLE = ROLE_CUSTOMER_SERVICE

# Role groups reused by routes and sidebar entries
OWNER_ONLY: FrozenSet[str] = frozenset({ROLE_OWNER})
SALES_DESK: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_CUSTOMER_SERVICE, ROLE_RECEPTIONIST, ROLE_STOCK_MANAGER})
FRONT_DESK: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_CUSTOMER_SERVICE, ROLE_RECEPTIONIST})
STAFF: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_CUSTOMER_SERVICE, ROLE_RECEPTIONIST, ROLE_SORTER, ROLE_STOCK_MANAGER})

HOME_PATH = '/dashboard'
LOGIN_PATH = '/login'


@dataclass(frozen=True)
class RouteRule:
    path: str
    allowed_roles: Optional[FrozenSet[str]] = None  # None: any authenticated role
    public: bool = False


ROUTES: Dict[str, RouteRule] = {rule.path: rule for rule in [
    RouteRule(LOGIN_PATH, public=True),
    RouteRule(HOME_PATH),
    RouteRule('/orders'),
    RouteRule('/customers'),
    RouteRule('/messages'),
    RouteRule('/settings'),
    RouteRule('/products'),
    RouteRule('/inventory'),
    RouteRule('/invoice', SALES_DESK),
    RouteRule('/sales', SALES_DESK),
    RouteRule('/ready-to-buy', FRONT_DESK),
    RouteRule('/finance', OWNER_ONLY),
    RouteRule('/profits', OWNER_ONLY),
    RouteRule('/expenses', OWNER_ONLY),
    RouteRule('/users', OWNER_ONLY),
]}

# (key, href, roles) in sidebar order
NAVIGATION: List[Tuple[str, str, FrozenSet[str]]] = [
    ('dashboard', HOME_PATH, STAFF),
    ('newInvoice', '/invoice', SALES_DESK),
    ('salesHistory', '/sales', SALES_DESK),
    ('products', '/products', SALES_DESK),
    ('inventory', '/inventory', SALES_DESK),
    ('finance', '/finance', OWNER_ONLY),
    ('profitReports', '/profits', OWNER_ONLY),
    ('expenses', '/expenses', OWNER_ONLY),
    ('userManagement', '/users', OWNER_ONLY),
    ('settings', '/settings', STAFF),
]
