# core/uv.py
class UV:
    """
    Represents an immutable 2D texture coordinate.
    """
    __slots__ = ("u", "v")

    def __init__(self, u: float = 0.0, v: float = 0.0):
        object.__setattr__(self, "u", float(u))
        object.__setattr__(self, "v", float(v))

    def __setattr__(self, name, value):
        raise AttributeError("UV is immutable")

    def __add__(self, other: "UV") -> "UV":
        return UV(self.u + other.u, self.v + other.v)

    def __sub__(self, other: "UV") -> "UV":
        return UV(self.u - other.u, self.v - other.v)

    def __mul__(self, t: float) -> "UV":
        return UV(self.u * t, self.v * t)

    def __truediv__(self, t: float) -> "UV":
        return UV(self.u / t, self.v / t)

    def __eq__(self, other) -> bool:
        if not isinstance(other, UV):
            return NotImplemented
        return self.u == other.u and self.v == other.v

    def __hash__(self) -> int:
        return hash((self.u, self.v))

    def __repr__(self) -> str:
        return f"UV({self.u}, {self.v})"
