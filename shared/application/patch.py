"""
Explicit optional-field support for partial updates.

A patch field is either ``UNSET`` (the caller did not mention it) or a value,
which may itself be ``None``. This keeps "leave unchanged" distinct from
"clear this value".
"""
from typing import Any, TypeVar, Union

T = TypeVar('T')


class _Unset:
    """Sentinel type for a patch field that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNSET: Any = _Unset()

Patchable = Union[T, _Unset]


def is_set(value: Any) -> bool:
    """Check whether a patch field was supplied."""
    return value is not UNSET

