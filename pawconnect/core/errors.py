"""
PawConnect 전역 예외 클래스.

각 예외는 HTTP 상태 코드와 응답용 error_code를 함께 가지며,
create_app에서 등록한 에러 핸들러가 이를 JSON 응답으로 변환합니다.
"""


class PawConnectError(Exception):
    """모든 PawConnect 도메인 예외의 기반 클래스."""
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "", error_code: str = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class UnauthenticatedError(PawConnectError):
    """자격 증명이 없거나 유효하지 않은 경우."""
    status_code = 401
    error_code = "UNAUTHENTICATED"


class ForbiddenError(PawConnectError):
    """인증은 되었지만 리소스 소유자가 아닌 경우."""
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(PawConnectError):
    """참조한 ID의 문서가 존재하지 않는 경우."""
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(PawConnectError):
    """고유해야 하는 값(예: 이메일)이 이미 사용 중인 경우."""
    status_code = 409
    error_code = "CONFLICT"


class AlreadyFavoriteError(PawConnectError):
    """이미 관심 목록에 있는 반려동물을 다시 추가하려는 경우."""
    status_code = 400
    error_code = "ALREADY_FAVORITE"


class StorageError(PawConnectError):
    """이미지 저장소 작업이 실패한 경우."""
    status_code = 500
    error_code = "STORAGE_ERROR"
