from fastapi import HTTPException


class NotFoundError(HTTPException):
    """ 참조한 사용자/팀/프로젝트/작업이 존재하지 않음 """

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class UnauthorizedError(HTTPException):
    """ 인증되지 않았거나, 필요한 권한(admin, 같은 팀)이 없음 """

    def __init__(self, detail: str = "Unauthorized", authenticated: bool = True):
        super().__init__(status_code=403 if authenticated else 401, detail=detail)


class InvalidStateError(HTTPException):
    """ 도메인 규칙 위반 (예: 다른 팀의 멤버 제거) """

    def __init__(self, detail: str):
        super().__init__(status_code=409, detail=detail)
