# rideshare_recon/data_model/interfaces/i_to_dict.py
from __future__ import annotations

from typing import Union

from typing_extensions import Protocol, TypeAlias, runtime_checkable

RecursiveDictStr: TypeAlias = Union[str, None, dict[str, "RecursiveDictStr"], list["RecursiveDictStr"]]


@runtime_checkable
class IToDict(Protocol):
    def to_dict(self) -> dict[str, RecursiveDictStr]: ...
