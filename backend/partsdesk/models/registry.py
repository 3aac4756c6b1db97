"""Import every model module so ``Base.metadata`` knows all tables before DDL runs."""
from partsdesk.models.account import Base, User, SchemaVersion, RevokedToken  # noqa: F401
from partsdesk.models import finance  # noqa: F401
from partsdesk.models import order  # noqa: F401
from partsdesk.models import product  # noqa: F401
from partsdesk.models import sales_invoice  # noqa: F401
from partsdesk.models import operations  # noqa: F401
from partsdesk.models import audit  # noqa: F401

metadata = Base.metadata
