from .ids import make_record_id, new_op_id, new_plan_id, new_uuid
from .time import normalize_dt, now_utc, parse_http_date, to_http_date

__all__ = [
    "new_uuid",
    "new_plan_id",
    "new_op_id",
    "make_record_id",
    "now_utc",
    "parse_http_date",
    "to_http_date",
    "normalize_dt",
]
