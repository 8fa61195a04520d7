from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

"""Hardware inventory attached to a record.

The inventory is collected elsewhere; here it is carried as an opaque value.
``cpus`` and ``gpus`` are always present; any other keys are kept in
``extra`` so stored records round-trip unchanged.
"""


@dataclass(frozen=True)
class SystemInfo:
    cpus: Tuple[str, ...] = ()
    gpus: Tuple[str, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cpus", tuple(self.cpus))
        object.__setattr__(self, "gpus", tuple(self.gpus))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"cpus": list(self.cpus), "gpus": list(self.gpus)}
        out.update(self.extra)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemInfo":
        """Build from a decoded mapping.

        ``cpus`` and ``gpus`` are required; a missing one raises ``ValueError``
        and a badly shaped one ``TypeError``.
        """
        if not isinstance(data, Mapping):
            raise TypeError("system info must be an object")
        missing = [label for label in ("cpus", "gpus") if label not in data]
        if missing:
            raise ValueError(f"system info is missing {', '.join(missing)}")
        cpus = data["cpus"]
        gpus = data["gpus"]
        for label, names in (("cpus", cpus), ("gpus", gpus)):
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise TypeError(f"system info '{label}' must be a list of strings")
        extra = {k: v for k, v in data.items() if k not in ("cpus", "gpus")}
        return cls(cpus=tuple(cpus), gpus=tuple(gpus), extra=extra)
