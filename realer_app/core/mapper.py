from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    """Turns ORM rows into response schemas.

    Keyword overrides fill fields the row does not carry itself (computed
    flags, nested summaries) and win over same-named attributes.
    """

    @staticmethod
    def one(item, schema: Type[T], **extra) -> T:
        if not extra:
            return schema.model_validate(item)
        data = {
            name: getattr(item, name)
            for name in schema.model_fields
            if name not in extra and hasattr(item, name)
        }
        return schema.model_validate({**data, **extra})

    @classmethod
    def many(cls, items: Iterable, schema: Type[T], **extra) -> list[T]:
        return [cls.one(item, schema, **extra) for item in items]
