"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Services raise these directly; the HTTP status travels with the error, so
routers never translate error kinds.

Usage:
    from staffing.utils.exceptions import NotFoundError, ConflictError
    raise NotFoundError("User not found")
    raise ConflictError("User is not available for assignment")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외: 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a requested user, site, or notification does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외: 중복 리소스 생성 시도 시 사용.

    Raised when a write would violate a uniqueness rule
    (e.g. duplicate username or email, duplicate site name).
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외: 현재 상태와 충돌하는 요청.

    Raised when the request is well-formed but the current state forbids it,
    e.g. assigning a user who is not available.
    """

    def __init__(self, detail: str = "Request conflicts with current state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class TransactionConflictError(HTTPException):
    """409 Conflict 예외: 동시 쓰기로 트랜잭션이 중단됨 (재시도 가능).

    Raised when the store aborts a transaction because another writer got
    there first (stale version, serialization failure, deadlock). Nothing was
    committed; the caller may retry the same request.
    """

    def __init__(self, detail: str = "Concurrent update detected, please retry") -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            headers={"Retry-After": "1"},
        )


class ForbiddenError(HTTPException):
    """403 Forbidden 예외: 권한 부족 시 사용.

    Raised when the authenticated user lacks the required role
    (e.g. a Chef attempting admin-only operations).
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외: 인증 실패 시 사용.

    Raised when authentication is missing, invalid, or expired.
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외: 잘못된 요청 데이터 시 사용.

    Raised when input is invalid beyond what Pydantic validation catches
    (e.g. a shift type the site does not operate).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
