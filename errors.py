# errors.py
"""
API 錯誤種類。

每一種錯誤對應固定的 HTTP 狀態碼與回應格式，由 main.py 的 exception handler 統一轉成 JSON：
- ValidationFailure    -> 422 {message, errors: {欄位: [訊息]}}
- AuthorizationFailure -> 403 {message}
- NotFound             -> 404 {message}
- Unauthenticated      -> 401 {message}
"""

VALIDATION_MESSAGE = "The given data was invalid."


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationFailure(ApiError):
    """欄位格式錯誤，或關聯條件不成立 (例如被指派者角色不對、日期不合法)。"""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        self.errors = errors
        if message is None:
            # 跟前端約定：只有一個錯誤時直接用該訊息當 message
            messages = [m for msgs in errors.values() for m in msgs]
            message = messages[0] if len(messages) == 1 else VALIDATION_MESSAGE
        super().__init__(message)

    @classmethod
    def field(cls, name: str, message: str) -> "ValidationFailure":
        return cls({name: [message]})

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class AuthorizationFailure(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found.")


class Unauthenticated(ApiError):
    status_code = 401

    def __init__(self, message: str = "Unauthenticated."):
        super().__init__(message)
