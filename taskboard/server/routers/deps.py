from dataclasses import dataclass
from typing import Optional

from fastapi import Header


@dataclass(frozen=True)
class CallerContext:
    """ 요청 단위의 호출자 정보 (외부 인증 식별자) """
    identity: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.identity)


ANONYMOUS = CallerContext()


def get_caller(x_user_identity: Optional[str] = Header(default=None)) -> CallerContext:
    """ X-User-Identity 헤더를 CallerContext 로 변환합니다. 헤더가 없으면 익명. """
    if not x_user_identity:
        return ANONYMOUS
    return CallerContext(identity=x_user_identity)
