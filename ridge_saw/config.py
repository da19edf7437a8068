import json
import math
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from ridge_saw.constants import DEFAULT_SCALE, DEFAULT_SIZE
from ridge_saw.errors import UsageError
from ridge_saw.surface import Distribution, NoiseConfig


# Expected JSON types of configuration file values; None is allowed except for REQUIRED_KEYS
INT_KEYS = ("size", "target_count", "seed")
FLOAT_KEYS = ("scale",)
STR_KEYS = ("input_path", "generate", "output_path", "ridgetool", "temp_dir", "loop_policy")
REQUIRED_KEYS = ("size", "scale", "loop_policy")


class LoopPolicy(Enum):
    """How the generate loop decides it has produced enough samples.

    FIXED never advances the sample counter: the loop runs once when no
    target is set and does not stop by itself when one is. ACCUMULATE
    adds each iteration's samples to the counter and stops at the target.
    """

    FIXED = "fixed"
    ACCUMULATE = "accumulate"


def _check_type(key: str, value: Any) -> Any:
    if value is None:
        if key in REQUIRED_KEYS:
            raise UsageError(f"Configuration value '{key}' must not be null")
        return None
    if key in INT_KEYS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise UsageError(f"Configuration value '{key}' must be an integer: {value!r}")
    elif key in FLOAT_KEYS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UsageError(f"Configuration value '{key}' must be a number: {value!r}")
        try:
            value = float(value)
        except OverflowError:
            raise UsageError(f"Configuration value '{key}' is out of range")
    elif key in STR_KEYS and not isinstance(value, str):
        raise UsageError(f"Configuration value '{key}' must be a string: {value!r}")
    return value


@dataclass
class RidgeSawConfig:
    input_path: Optional[str] = None
    generate: Optional[Distribution] = None
    size: int = DEFAULT_SIZE
    scale: float = DEFAULT_SCALE
    target_count: Optional[int] = None
    seed: Optional[int] = None
    output_path: Optional[str] = None
    loop_policy: LoopPolicy = LoopPolicy.ACCUMULATE
    ridgetool: Optional[str] = None
    temp_dir: Optional[str] = None

    @property
    def generate_mode(self) -> bool:
        return self.generate is not None

    def validate(self) -> "RidgeSawConfig":
        if self.input_path is not None and self.generate is not None:
            raise UsageError("Only one of '-i' or '-r' options may be given.")
        if self.input_path is None and self.generate is None:
            raise UsageError("You must specify '-r' or '-i' options.")
        if self.size < 1:
            raise UsageError(f"Bad argument '{self.size}' to -d option.")
        if not math.isfinite(self.scale) or self.scale < 0:
            raise UsageError(f"Bad argument '{self.scale}' to -t option.")
        if self.target_count is not None:
            if self.target_count < 1:
                raise UsageError(f"Bad argument '{self.target_count}' to -n option.")
            if not self.generate_mode:
                raise UsageError("The '-n' option is only valid with '-r'.")
        if self.seed is not None and self.seed < 0:
            raise UsageError(f"Bad argument '{self.seed}' to -s option.")
        return self

    def noise_config(self) -> NoiseConfig:
        if self.generate is None:
            raise UsageError("Noise settings requested without '-r'.")
        return NoiseConfig(
            distribution=self.generate,
            size=self.size,
            seed=self.seed,
            target_count=self.target_count,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RidgeSawConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise UsageError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        values = {key: _check_type(key, value) for key, value in data.items()}
        try:
            if values.get("generate") is not None:
                values["generate"] = Distribution.parse(str(values["generate"]))
            if "loop_policy" in values:
                values["loop_policy"] = LoopPolicy(values["loop_policy"])
        except ValueError as err:
            raise UsageError(f"Bad configuration value: {err}") from err
        return cls(**values)

    @classmethod
    def from_json(cls, path: str | Path) -> "RidgeSawConfig":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as err:
            raise UsageError(f"Failed to read configuration '{path}': {err}") from err
        if not isinstance(data, dict):
            raise UsageError(f"Configuration '{path}' must be a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["generate"] = self.generate.value if self.generate else None
        data["loop_policy"] = self.loop_policy.value
        return data
