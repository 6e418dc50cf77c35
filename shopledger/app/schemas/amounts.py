"""
Lenient money input for request schemas.

Amount fields accept numbers or strings (with thousands separators). They are
read with the lenient parser before pydantic validates them, so unreadable
input becomes zero and then meets the field's own constraints. Every
coercion is kept on the instance for auditing.
"""

from typing import Any, ClassVar, Dict, List, Tuple

from pydantic import BaseModel, PrivateAttr, model_validator

from shopledger.app.domain.money import parse_amount


class LenientAmountModel(BaseModel):
    """Base for request schemas that carry money fields."""
    amount_fields: ClassVar[Tuple[str, ...]] = ()
    partial: ClassVar[bool] = False

    _coercions: List[Dict[str, Any]] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def parse_amount_fields(cls, data: Any, handler):
        coercions: List[Dict[str, Any]] = []
        if isinstance(data, dict):
            data = dict(data)
            for field in cls.amount_fields:
                if field not in data:
                    continue
                # Update schemas treat null as "not provided".
                if cls.partial and data[field] is None:
                    continue
                data[field] = parse_amount(data[field], field, coercions)
        instance = handler(data)
        instance._coercions = coercions
        return instance

    @property
    def coercions(self) -> List[Dict[str, Any]]:
        return list(self._coercions)
