from datetime import date, timedelta
from math import ceil

ACTIVITY_FILTERS = (
    ('type', 'activity_type', '='),
    ('date_from', 'activity_date', '>='),
    ('date_to', 'activity_date', '<='),
)

SUGGESTION_FILTERS = (
    ('type', 'suggestion_type', '='),
)

REPORT_PERIODS = (7, 30, 90, 365)
DEFAULT_PERIOD = 30

# keeps LIMIT/OFFSET inside SQLite's 64-bit INTEGER range
MAX_PAGE = 2 ** 31


class QueryFilter:
    """WHERE clause built from optional conditions.

    Column names and operators come from module constants only; every value
    is bound as a ``?`` parameter.
    """

    def __init__(self, column, value):
        self.clauses = [f'{column} = ?']
        self.params = [value]

    def add(self, column, operator, value):
        if value is None or value == '':
            return self
        self.clauses.append(f'{column} {operator} ?')
        self.params.append(value)
        return self

    def add_in(self, column, values):
        placeholders, params = in_clause(values)
        self.clauses.append(f'{column} IN {placeholders}')
        self.params.extend(params)
        return self

    @property
    def where(self):
        return 'WHERE ' + ' AND '.join(self.clauses)

    def paginated(self, limit, offset):
        """Return (sql_tail, params) with LIMIT/OFFSET appended as parameters."""
        return 'LIMIT ? OFFSET ?', self.params + [limit, offset]


def in_clause(values):
    values = list(values)
    if not values:
        raise ValueError('IN clause needs at least one value')
    return '(' + ', '.join('?' for _ in values) + ')', values


def _build(user_id, filters, spec):
    query = QueryFilter('user_id', user_id)
    filters = filters or {}
    for key, column, operator in spec:
        query.add(column, operator, filters.get(key))
    return query


def activity_filters(user_id, filters=None):
    return _build(user_id, filters, ACTIVITY_FILTERS)


def suggestion_filters(user_id, filters=None):
    return _build(user_id, filters, SUGGESTION_FILTERS)


def period_start(days, today=None):
    """First date (ISO) of a lookback window of ``days`` days ending today."""
    today = today or date.today()
    return (today - timedelta(days=int(days))).isoformat()


def parse_period(value):
    try:
        period = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PERIOD
    return period if period in REPORT_PERIODS else DEFAULT_PERIOD


def parse_page(value):
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    if page < 1 or page > MAX_PAGE:
        return 1
    return page


def page_window(page, page_size):
    return page_size, (page - 1) * page_size


def total_pages(total, page_size):
    return ceil(total / page_size) if total else 0
