from dataclasses import dataclass
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class RGBColor:
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def to_dict(self) -> dict:
        return {"r": self.r, "g": self.g, "b": self.b}

    @classmethod
    def from_dict(cls, data: dict) -> "RGBColor":
        return cls(int(data["r"]), int(data["g"]), int(data["b"]))

@dataclass(frozen=True)
class AnalysisResult:
    x: int
    y: int
    ratio: float
    score: float
    colors: Tuple[RGBColor, ...] = ()
    compliant: bool = False

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "ratio": self.ratio,
            "score": self.score,
            "colors": [c.to_dict() for c in self.colors],
            "compliant": self.compliant,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            ratio=float(data["ratio"]),
            score=float(data["score"]),
            colors=tuple(RGBColor.from_dict(c) for c in data.get("colors", [])),
            compliant=bool(data.get("compliant", False)),
        )

@dataclass(frozen=True)
class ElementCheck:
    background: RGBColor
    foreground: RGBColor
    ratio: float
    score: float
    compliant: bool
    label: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "background": self.background.to_hex(),
            "foreground": self.foreground.to_hex(),
            "ratio": self.ratio,
            "score": self.score,
            "compliant": self.compliant,
        }

@dataclass
class AnalysisReport:
    results: List[AnalysisResult]
    width: int
    height: int
    block_size: int
    processing_time_ms: float

    def to_dict(self) -> dict:
        return {
            "results": [r.to_dict() for r in self.results],
            "width": self.width,
            "height": self.height,
            "block_size": self.block_size,
            "processing_time_ms": self.processing_time_ms,
        }
