"""Named enumerated types of the store.

On PostgreSQL each one is a native ``CREATE TYPE ... AS ENUM``; other dialects
store the label as VARCHAR.
"""
from __future__ import annotations
from typing import List
from sqlalchemy import Enum

from partsdesk.constants.roles import ROLES

ORDER_STATUSES = (
    'pending', 'processing', 'shipped', 'delivered', 'cancelled', 'partially_arrived',
    'ready_to_collect', 'with_shipping_company', 'ready_to_buy',
)
TASK_STATUSES = ('pending', 'completed', 'to_collect')
TASK_TYPES = ('task', 'delivery', 'pickup', 'receive_payment')
EXPENSE_CATEGORIES = (
    'employee_salaries', 'supplier_expenses', 'marketing_commission', 'rent', 'cleaning_salaries', 'other',
)
CURRENCIES = ('USD', 'LYD')
ACCOUNT_TYPES = ('debit', 'credit')
TRANSACTION_TYPES = ('deposit', 'withdrawal', 'transfer', 'settlement', 'currency_adjustment')
RECEIPT_TYPES = ('payment', 'collection')
BRANCHES = ('ALFANI1', 'ALFANI2')

user_role = Enum(*ROLES, name='user_role')
order_status = Enum(*ORDER_STATUSES, name='order_status')
task_status = Enum(*TASK_STATUSES, name='task_status')
task_type = Enum(*TASK_TYPES, name='task_type')
expense_category = Enum(*EXPENSE_CATEGORIES, name='expense_category')
currency = Enum(*CURRENCIES, name='currency')
account_type = Enum(*ACCOUNT_TYPES, name='account_type')
transaction_type = Enum(*TRANSACTION_TYPES, name='transaction_type')
receipt_type = Enum(*RECEIPT_TYPES, name='receipt_type')
branch = Enum(*BRANCHES, name='branch')

# Creation order used by the bootstrapper (types before any table that uses them)
ENUM_TYPES: List[Enum] = [
    user_role,
    order_status,
    task_status,
    task_type,
    expense_category,
    currency,
    account_type,
    transaction_type,
    receipt_type,
    branch,
]
