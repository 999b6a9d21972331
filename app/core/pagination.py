import math
from typing import Sequence, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


def paginate(items: Sequence[T], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> tuple[list[T], Pagination]:
    total = len(items)
    offset = (page - 1) * limit
    meta = Pagination(
        page=page,
        limit=limit,
        total=total,
        totalPages=math.ceil(total / limit),
    )
    return list(items[offset:offset + limit]), meta
