from fastapi import status

from auth_service.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Error code -> HTTP status for errors returned by use cases
ERROR_STATUS_CODES = {
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "RATE_LIMIT_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
    "INVALID_CODE": status.HTTP_400_BAD_REQUEST,
    "ATTEMPTS_EXCEEDED": status.HTTP_400_BAD_REQUEST,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "USER_DISABLED": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def raise_for_error(error: Error, overrides: dict = None):
    """Raise the ClientError for a known error code, ServerError otherwise"""
    status_codes = {**ERROR_STATUS_CODES, **(overrides or {})}
    status_code = status_codes.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
