# app/models/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """모든 SQLAlchemy 모델의 기반이 되는 선언적 기본 클래스.

    이 클래스는 SQLAlchemy 2.0의 `DeclarativeBase`를 상속받아,
    Trip/Day/Stop/Expense 모델이 동일한 메타데이터 레지스트리를 공유하게 합니다.
    `Base.metadata.create_all()` 한 번으로 전체 스키마를 생성할 수 있습니다.
    """

    pass
