"""여행 도메인 ORM 모델 모음.

관계(relationship)가 문자열로 서로를 참조하므로 매퍼 구성 전에 모든 모델을 등록합니다.
"""

from app.models.base import Base
from app.models.comment import StopComment
from app.models.day import Day
from app.models.expense import Expense
from app.models.stop import Stop
from app.models.trip import Trip

__all__ = ["Base", "Day", "Expense", "Stop", "StopComment", "Trip"]
