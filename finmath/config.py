from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
import os
import io
import yaml

from finmath.finance.numeric import DEFAULT_DECIMAL_PRECISION, NUMERICS, Numeric, get_numeric

ENV_NUMERIC = "FINMATH_NUMERIC"


@dataclass(frozen=True)
class Settings:
    numeric: str = "decimal"
    decimal_precision: int = DEFAULT_DECIMAL_PRECISION
    digits: int = 2
    guess: float = 0.1

    def backend(self) -> Numeric:
        return get_numeric(self.numeric, self.decimal_precision)


def _parse_yaml_fallback(text: str) -> Dict[str, Any]:
    """
    Super-tolerant parser for key: value lines (only for emergencies).
    Numbers are coerced when obvious.
    """
    data: Dict[str, Any] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if ":" not in line:
            continue
        k, v = line.split(":", 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        try:
            data[k] = float(v) if "." in v else int(v)
        except ValueError:
            data[k] = v
    return data


def _flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'solver': {...}, 'output': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = dict(cfg)
    for k, v in list(cfg.items()):
        if isinstance(v, dict):
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _settings_from_mapping(data: Dict[str, Any]) -> Settings:
    kwargs: Dict[str, Any] = {}
    for name in (f.name for f in fields(Settings)):
        if name not in data or data[name] is None:
            continue
        default = getattr(Settings, name)
        try:
            kwargs[name] = type(default)(data[name])
        except (TypeError, ValueError):
            raise ValueError(f"config: {name} must be {type(default).__name__}, got {data[name]!r}") from None
    if "numeric" in kwargs:
        kwargs["numeric"] = kwargs["numeric"].strip().lower()
    settings = Settings(**kwargs)
    if settings.numeric not in NUMERICS:
        raise ValueError(f"config: numeric must be one of {sorted(NUMERICS)}, got {settings.numeric!r}")
    if settings.digits < 0:
        raise ValueError(f"config: digits must be >= 0, got {settings.digits}")
    if settings.decimal_precision < 1:
        raise ValueError(f"config: decimal_precision must be >= 1, got {settings.decimal_precision}")
    return settings


def load_settings(
    source: str | os.PathLike | io.StringIO | None = None,
) -> Settings:
    """
    Load settings from a YAML path or text stream. If YAML fails, use a
    tolerant fallback. With no source, defaults apply. FINMATH_NUMERIC
    overrides the numeric representation either way.
    """
    cfg: Dict[str, Any] = {}
    if source is not None:
        if hasattr(source, "read"):
            text = str(source.read())
        else:
            p = os.fspath(source)
            with open(p, "r", encoding="utf-8") as f:
                text = f.read()
        try:
            loaded = yaml.safe_load(text) or {}
            cfg = loaded if isinstance(loaded, dict) else {}
        except yaml.YAMLError:
            cfg = _parse_yaml_fallback(text)

    settings = _settings_from_mapping(_flatten_grouped(cfg))
    env = (os.environ.get(ENV_NUMERIC) or "").strip().lower()
    if env:
        if env not in NUMERICS:
            raise ValueError(f"{ENV_NUMERIC} must be one of {sorted(NUMERICS)}, got {env!r}")
        settings = replace(settings, numeric=env)
    return settings


__all__ = ["Settings", "load_settings", "ENV_NUMERIC"]
