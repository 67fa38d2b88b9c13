import time
from datetime import datetime, timedelta
from typing import Optional


def now_ms() -> int:
    """ 현재 시각 (epoch milliseconds) """
    return int(time.time() * 1000)


def to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def start_of_day_ms(moment: Optional[datetime] = None) -> int:
    """ 로컬 기준 자정 시각 (epoch milliseconds) """
    moment = moment or datetime.now()
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)


def days_ago_ms(days: int, moment: Optional[datetime] = None) -> int:
    moment = moment or datetime.now()
    return int((moment - timedelta(days=days)).timestamp() * 1000)
