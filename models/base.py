# models/base.py
from datetime import datetime, timezone

from pydantic import BaseModel, ValidationError

from errors import ValidationFailure


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """沒有時區的時間一律當作 UTC，避免 naive/aware 比較時出錯。"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def error_bag(exc, skip_prefix: tuple = ()) -> dict[str, list[str]]:
    """把 pydantic (或 FastAPI RequestValidationError) 的錯誤清單轉成 {欄位: [訊息, ...]} 的格式"""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err["loc"] if part not in skip_prefix]
        field = ".".join(loc) or "body"
        # 自訂 validator 丟出的 ValueError 會被加上 "Value error, " 前綴
        message = err["msg"].removeprefix("Value error, ")
        errors.setdefault(field, []).append(message)
    return errors


def parse_payload(model: type[BaseModel], payload: dict | None) -> BaseModel:
    """
    驗證請求內容。
    路由層收到的是原始 dict，要等權限檢查通過之後才在 service 裡呼叫這個函式，
    所以沒有權限的人永遠拿到 403，而不是 422。
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailure.field("body", "The request body must be a JSON object.")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailure(error_bag(exc)) from exc
