"""src.core.exceptions
파이프라인 공통 예외 정의

모든 예외는 CustomError를 상속하며, message는 그대로 places.error_message에 기록됩니다.
"""


class CustomError(Exception):
    """서비스 공통 예외"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageUnavailable(CustomError):
    """스토리지에서 미디어를 가져오지 못한 경우"""


class PayloadTooLarge(CustomError):
    """미디어 크기가 허용 한도를 초과한 경우"""


class UpstreamError(CustomError):
    """외부 API가 비정상 응답을 반환한 경우"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(CustomError):
    """AI 응답을 기대한 JSON 형태로 해석할 수 없는 경우"""


class InvalidExtraction(CustomError):
    """AI가 추출한 장소가 스키마를 위반한 경우"""


class NoPlacesFound(CustomError):
    """AI가 장소를 하나도 찾지 못한 경우"""


class PersistenceError(CustomError):
    """DB 삭제/삽입/수정 실패"""
